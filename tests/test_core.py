import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from PIL import Image as PILImage

from pixelcanvas import bmp
from pixelcanvas.cli import main
from pixelcanvas.core import (
    DrawOptions,
    draw_dot,
    draw_line,
    export_picture,
    from_pil,
    import_picture,
    new_canvas,
    read_bmp,
    resize_file,
    to_pil,
)
from pixelcanvas.errors import PixelCanvasError, SizeMismatch
from pixelcanvas.formatting import describe_image, format_color, parse_color
from pixelcanvas.image import BLACK, WHITE

RED = (0xFF, 0x00, 0x00, 0xFF)


class _TmpDirCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()


class TestFiles(_TmpDirCase):
    def test_new_canvas(self):
        out = self.dir / "sub" / "blank.bmp"
        new_canvas(out, 3, 2, DrawOptions(background=BLACK))
        img = read_bmp(out)
        self.assertEqual((img.width, img.height), (3, 2))
        self.assertEqual(img.pixel(2, 1), BLACK)
        self.assertEqual(out.stat().st_size, 0x36 + 12 * 2)

    def test_missing_file(self):
        with self.assertRaises(PixelCanvasError):
            read_bmp(self.dir / "nope.bmp")

    def test_corrupt_file_propagates_format_error(self):
        path = self.dir / "bad.bmp"
        path.write_bytes(bmp.encode(bmp.create(width=2, height=2))[:-1])
        with self.assertRaises(SizeMismatch):
            read_bmp(path)

    def test_draw_dot_and_line(self):
        src = self.dir / "c.bmp"
        new_canvas(src, 6, 6, DrawOptions())
        out = self.dir / "d.bmp"
        self.assertEqual(len(draw_dot(src, out, 1.5, 4.5, DrawOptions(color=RED))), 1)
        painted = draw_line(out, out, (0, 0), (3, 3), DrawOptions(color=RED))
        self.assertEqual([tuple(p) for p in painted], [(0, 0), (1, 1), (2, 2), (3, 3)])
        img = read_bmp(out)
        self.assertEqual(img.pixel(1, 4), RED)
        self.assertEqual(img.pixel(2, 2), RED)
        self.assertEqual(img.pixel(2, 3), WHITE)
        # source untouched
        self.assertEqual(read_bmp(src).pixel(1, 4), WHITE)

    def test_resize_file(self):
        src = self.dir / "r.bmp"
        new_canvas(src, 2, 2, DrawOptions())
        draw_dot(src, src, 1, 1, DrawOptions(color=RED))
        img = resize_file(src, src, 4, 3, DrawOptions(background=BLACK))
        self.assertEqual(img.size, (4, 3))
        again = read_bmp(src)
        self.assertEqual(again.pixel(1, 1), RED)
        self.assertEqual(again.pixel(3, 2), BLACK)

    def test_pillow_round_trip(self):
        img = bmp.create(width=2, height=2, red=b"\x00\x00\xff\xff", green=b"\x00\xff\x00\xff",
                         blue=b"\xff\x00\x00\xff", alpha=b"\xff" * 4)
        pil = to_pil(img)
        self.assertEqual(pil.mode, "RGBA")
        self.assertEqual(pil.getpixel((0, 1)), (0xFF, 0, 0, 0xFF))
        self.assertEqual(from_pil(pil), img)

    def test_export_import_png(self):
        src = self.dir / "p.bmp"
        new_canvas(src, 3, 3, DrawOptions())
        draw_line(src, src, (0, 2), (2, 2), DrawOptions(color=RED))
        png = self.dir / "p.png"
        export_picture(png, read_bmp(src))
        with PILImage.open(png) as pil:
            self.assertEqual(pil.format, "PNG")
        back = import_picture(png)
        self.assertEqual(back.pixel(1, 2), RED)
        self.assertEqual(back.pixel(1, 1), WHITE)

    def test_import_not_an_image(self):
        path = self.dir / "x.png"
        path.write_bytes(b"definitely not a picture")
        with self.assertRaises(PixelCanvasError):
            import_picture(path)

    def test_export_unknown_extension(self):
        with self.assertRaises(PixelCanvasError):
            export_picture(self.dir / "x.nosuchformat", bmp.create(width=1, height=1))

    def test_export_bmp_stays_24bpp(self):
        img = bmp.create(width=3, height=2, red=b"\xff" * 6, alpha=b"\x80" * 6)
        out = self.dir / "copy.BMP"
        export_picture(out, img)
        data = out.read_bytes()
        self.assertEqual(list(data[0x1C:0x1E]), [24, 0])
        back = read_bmp(out)
        self.assertEqual(back.red, img.red)
        self.assertEqual(back.green, img.green)

    def test_directory_paths(self):
        with self.assertRaises(PixelCanvasError):
            read_bmp(self.dir)
        with self.assertRaises(PixelCanvasError):
            import_picture(self.dir)


class TestFormatting(unittest.TestCase):
    def test_parse_color(self):
        self.assertEqual(parse_color("#FF8000"), (0xFF, 0x80, 0x00, 0xFF))
        self.assertEqual(parse_color("#ff800040"), (0xFF, 0x80, 0x00, 0x40))
        for bad in ("ff8000", "#ff80", "#gg0000", ""):
            with self.assertRaises(ValueError):
                parse_color(bad)

    def test_format_color(self):
        self.assertEqual(format_color((1, 2, 3, 0xFF)), "#010203")
        self.assertEqual(format_color((1, 2, 3, 4)), "#01020304")

    def test_describe(self):
        self.assertIn("empty", describe_image(bmp.create()))
        img = bmp.create(width=2, height=1, red=b"\x00\xff")
        self.assertEqual(describe_image(img), "2x1 px, 2 distinct colors")


class TestCli(_TmpDirCase):
    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        code = 0
        with redirect_stdout(out), redirect_stderr(err):
            try:
                main([str(a) for a in argv])
            except SystemExit as e:
                code = e.code
        return code, out.getvalue(), err.getvalue()

    def test_new_line_info(self):
        path = self.dir / "a.bmp"
        code, out, _ = self.run_cli("new", 4, 4, path, "--verbose")
        self.assertEqual(code, 0)
        self.assertIn("Wrote", out)
        code, _, _ = self.run_cli("line", path, 0, 0, 3, 0, "--color", "#ff0000")
        self.assertEqual(code, 0)
        self.assertEqual(read_bmp(path).pixel(3, 0), RED)
        code, out, _ = self.run_cli("info", path)
        self.assertEqual(code, 0)
        self.assertIn("4x4 px, 2 distinct colors", out)

    def test_dot_to_output(self):
        path = self.dir / "a.bmp"
        dst = self.dir / "b.bmp"
        self.run_cli("new", 2, 2, path)
        code, _, _ = self.run_cli("dot", path, 1, 0, "-o", dst, "--color", "#ff0000")
        self.assertEqual(code, 0)
        self.assertEqual(read_bmp(dst).pixel(1, 0), RED)
        self.assertEqual(read_bmp(path).pixel(1, 0), WHITE)

    def test_resize_export_import(self):
        path = self.dir / "a.bmp"
        self.run_cli("new", 2, 2, path)
        self.assertEqual(self.run_cli("resize", path, 5, 1)[0], 0)
        self.assertEqual(read_bmp(path).size, (5, 1))
        png = self.dir / "a.png"
        self.assertEqual(self.run_cli("export", path, png)[0], 0)
        back = self.dir / "back.bmp"
        self.assertEqual(self.run_cli("import", png, back)[0], 0)
        self.assertEqual(read_bmp(back).size, (5, 1))

    def test_format_error_exit_code(self):
        path = self.dir / "bad.bmp"
        path.write_bytes(b"XX" + bytes(60))
        code, _, err = self.run_cli("info", path)
        self.assertEqual(code, 2)
        self.assertIn("BadSignature", err)

    def test_directory_exit_code(self):
        code, _, err = self.run_cli("import", self.dir, self.dir / "out.bmp")
        self.assertEqual(code, 2)
        self.assertIn("Cannot read", err)

    def test_export_to_bmp_is_readable(self):
        path = self.dir / "a.bmp"
        self.run_cli("new", 2, 2, path)
        self.assertEqual(self.run_cli("export", path, self.dir / "b.bmp")[0], 0)
        code, out, _ = self.run_cli("info", self.dir / "b.bmp")
        self.assertEqual(code, 0)
        self.assertIn("2x2 px", out)

    def test_missing_file_exit_code(self):
        code, _, err = self.run_cli("info", self.dir / "missing.bmp")
        self.assertEqual(code, 2)
        self.assertIn("File not found", err)

    def test_bad_color_is_usage_error(self):
        path = self.dir / "a.bmp"
        self.run_cli("new", 1, 1, path)
        code, _, _ = self.run_cli("dot", path, 0, 0, "--color", "red")
        self.assertEqual(code, 2)

    def test_no_command(self):
        code, out, _ = self.run_cli()
        self.assertEqual(code, 1)
        self.assertIn("usage", out)


if __name__ == "__main__":
    unittest.main()
