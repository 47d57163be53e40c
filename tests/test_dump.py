"""Tests for the gpxdump command."""

import io

from gpxcodec.dump import dump, main


class TestDump:

    def test_dump_prints_records(self):
        out = io.StringIO()
        dump(io.BytesIO(b'<gpx version="1.1"><wpt lat="1.5" lon="2.5"><name>A</name></wpt></gpx>'), out)
        text = out.getvalue()
        assert text.startswith("GPX(")
        assert "Waypoint(" in text
        assert "lat=1.5" in text
        assert "name='A'" in text


class TestMain:

    def test_file(self, data_dir, capsys):
        assert main([str(data_dir / "fells_loop.gpx")]) == 0
        out = capsys.readouterr().out
        assert "lat=42.438878" in out
        assert "name='BELLEVUE'" in out

    def test_missing_file(self, tmp_path, capsys):
        path = tmp_path / "missing.gpx"
        assert main([str(path)]) == 1
        assert capsys.readouterr().err.startswith(f"gpxdump: {path}: ")

    def test_malformed_file(self, tmp_path, capsys):
        path = tmp_path / "broken.gpx"
        path.write_bytes(b'<gpx version="1.1"><wpt lat="1" lon="2">')
        assert main([str(path)]) == 1
        assert "malformed XML" in capsys.readouterr().err

    def test_time_layout_option(self, tmp_path, capsys):
        path = tmp_path / "legacy.gpx"
        path.write_bytes(b'<gpx version="1.1"><wpt lat="1" lon="2">'
                         b'<time>2001-11-28 21:05:28</time></wpt></gpx>')
        assert main([str(path)]) == 1
        assert "no matching time layout" in capsys.readouterr().err
        assert main(["--time-layout", "%Y-%m-%d %H:%M:%S", str(path)]) == 0
        assert "2001, 11, 28, 21, 5, 28" in capsys.readouterr().out
