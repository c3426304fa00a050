"""
Tests for the credcheck command line.
"""

import io

from credcheck.cli import main


class TestMain:
    """Tests for cli.main()."""

    def test_main_when_file_then_prints_summary(self, tmp_path, capsys, sample_batch):
        path = tmp_path / "input.txt"
        path.write_text(sample_batch, encoding="utf-8")

        code = main([str(path)])

        assert code == 0
        assert capsys.readouterr().out == "found 2 valid passports out of 4\n"

    def test_main_when_stdin_then_reads_it(self, monkeypatch, capsys, valid_batch):
        monkeypatch.setattr("sys.stdin", io.StringIO(valid_batch))

        code = main(["-"])

        assert code == 0
        assert "found 4 valid passports out of 4" in capsys.readouterr().out

    def test_main_when_presence_only_then_ignores_values(self, tmp_path, capsys, invalid_batch):
        path = tmp_path / "input.txt"
        path.write_text(invalid_batch, encoding="utf-8")

        main([str(path), "--presence-only"])

        assert capsys.readouterr().out == "found 4 valid passports out of 4\n"

    def test_main_when_show_then_one_line_per_record(self, tmp_path, capsys, sample_batch):
        path = tmp_path / "input.txt"
        path.write_text(sample_batch, encoding="utf-8")

        main([str(path), "--show", "--workers", "2"])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "0 valid"
        assert lines[1] == "1 invalid hgt: missing field"
        assert lines[2] == "2 valid"
        assert lines[3] == "3 invalid byr: missing field"
        assert lines[4] == "found 2 valid passports out of 4"

    def test_main_when_missing_file_then_exit_2(self, tmp_path, capsys):
        code = main([str(tmp_path / "nope.txt")])

        assert code == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_main_when_bad_workers_then_exit_2(self, tmp_path, capsys, sample_batch):
        path = tmp_path / "input.txt"
        path.write_text(sample_batch, encoding="utf-8")

        assert main([str(path), "--workers", "0"]) == 2
        assert "workers" in capsys.readouterr().err

    def test_main_when_file_not_utf8_then_exit_2(self, tmp_path, capsys):
        path = tmp_path / "input.txt"
        path.write_bytes(b"byr:1980 hcl:\xff\xfe\n")

        code = main([str(path)])

        assert code == 2
        assert capsys.readouterr().err.startswith("error:")
