"""Test the command-line interface"""

import json

import pytest
import yaml
from click.testing import CliRunner

from track_codec import __version__
from track_codec.cli import cli


@pytest.fixture
def runner(temp_dir, monkeypatch, clean_logging):
    """CLI runner working in an empty directory (no track-codec.yaml)"""
    monkeypatch.chdir(temp_dir)
    return CliRunner()


class TestCliBasics:
    """Test top-level options"""

    def test_version(self, runner):
        """--version prints the package version"""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert f"track-codec {__version__}" in result.output

    def test_help_without_command(self, runner):
        """No command shows help"""
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "decode" in result.output
        assert "encode" in result.output

    def test_missing_config(self, runner, temp_dir, rick_roll_encoded):
        """An explicit config that does not exist exits with status 2"""
        result = runner.invoke(
            cli, ["--config", str(temp_dir / "missing.yaml"), "decode", rick_roll_encoded]
        )
        assert result.exit_code == 2
        assert "Configuration error" in result.output


class TestDecodeCommand:
    """Test `track-codec decode`"""

    def test_decode_yaml_stdout(self, runner, rick_roll_encoded):
        """Default output is YAML on stdout"""
        result = runner.invoke(cli, ["decode", rick_roll_encoded])
        assert result.exit_code == 0, result.output
        assert "title: Rick Astley - Never Gonna Give You Up" in result.output
        assert "isSeekable: true" in result.output

    def test_decode_json_file(self, runner, temp_dir, rick_roll_encoded, rick_roll_info_dict):
        """--format json --output writes a JSON list"""
        out = temp_dir / "tracks.json"
        result = runner.invoke(
            cli, ["decode", rick_roll_encoded, "--format", "json", "--output", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8")) == [rick_roll_info_dict]

    def test_decode_format_from_config(self, runner, temp_dir, rick_roll_encoded):
        """output.format in track-codec.yaml selects JSON"""
        (temp_dir / "track-codec.yaml").write_text("output:\n  format: json\n", encoding="utf-8")
        result = runner.invoke(cli, ["decode", rick_roll_encoded])

        assert result.exit_code == 0, result.output
        assert '"sourceName": "youtube"' in result.output

    def test_decode_file_with_failure(self, runner, temp_dir, rick_roll_encoded, rick_roll_info_dict):
        """Bad lines are reported, good ones still decoded, exit status 1"""
        track_file = temp_dir / "tracks.txt"
        track_file.write_text(f"{rick_roll_encoded}\n\nAAAA\n", encoding="utf-8")
        out = temp_dir / "tracks.yaml"

        result = runner.invoke(
            cli, ["decode", "--file", str(track_file), "--output", str(out)]
        )

        assert result.exit_code == 1
        assert "Decode failed" in result.output
        assert yaml.safe_load(out.read_text(encoding="utf-8")) == [rick_roll_info_dict]

    def test_decode_without_input(self, runner):
        """decode needs at least one track"""
        result = runner.invoke(cli, ["decode"])
        assert result.exit_code == 2

    def test_verbose(self, runner, rick_roll_encoded):
        """--verbose shows debug messages"""
        result = runner.invoke(cli, ["--verbose", "decode", rick_roll_encoded])
        assert result.exit_code == 0, result.output
        assert "Decoding 1 tracks" in result.output


class TestEncodeCommand:
    """Test `track-codec encode`"""

    def test_encode_single_mapping(self, runner, temp_dir, rick_roll_encoded, rick_roll_info_dict):
        """A single mapping encodes to one line"""
        source = temp_dir / "track.yaml"
        source.write_text(yaml.safe_dump(rick_roll_info_dict), encoding="utf-8")

        result = runner.invoke(cli, ["encode", str(source)])

        assert result.exit_code == 0, result.output
        assert rick_roll_encoded in result.output.splitlines()

    def test_decode_then_encode(self, runner, temp_dir, rick_roll, live_stream):
        """JSON written by decode is accepted by encode"""
        from track_codec.codec import encode_base64

        encoded = [encode_base64(rick_roll), encode_base64(live_stream)]
        decoded_path = temp_dir / "decoded.json"
        encoded_path = temp_dir / "encoded.txt"

        result = runner.invoke(
            cli, ["decode", *encoded, "--format", "json", "--output", str(decoded_path)]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["encode", str(decoded_path), "--output", str(encoded_path)])
        assert result.exit_code == 0, result.output
        assert encoded_path.read_text(encoding="utf-8").splitlines() == encoded

    def test_encode_missing_keys(self, runner, temp_dir):
        """Incomplete track info fails with status 1"""
        source = temp_dir / "bad.yaml"
        source.write_text("title: Only a title\n", encoding="utf-8")

        result = runner.invoke(cli, ["encode", str(source)])
        assert result.exit_code == 1
        assert "missing required keys" in result.output

    def test_encode_wrong_document(self, runner, temp_dir):
        """The document must hold mappings"""
        source = temp_dir / "number.yaml"
        source.write_text("42\n", encoding="utf-8")

        result = runner.invoke(cli, ["encode", str(source)])
        assert result.exit_code == 1
        assert "must contain a track info mapping" in result.output
