"""Unit tests for load_arrangement / aload_arrangement and schema validation."""

import errno
from pathlib import Path

import pytest

from hal_stubs.arrangement import aload_arrangement, load_arrangement, parse_arrangement
from hal_stubs.error import ArrangementError, ResponsesExhaustedError, StubbedError, StubIoError
from hal_stubs.returns import ResponseSequence


class TestLoadArrangement:
    """Tests for load_arrangement."""

    def test_packaged_arrangement_returns_sequences(self) -> None:
        """load_arrangement returns Dict[str, ResponseSequence]."""
        sequences = load_arrangement("spi_flaky_write")
        assert set(sequences) == {"write"}
        assert all(isinstance(s, ResponseSequence) for s in sequences.values())

    def test_packaged_arrangement_has_declared_policies(self) -> None:
        sequences = load_arrangement("spi_flaky_write")
        assert [spec.remaining for spec in sequences["write"]] == [2, None]

    def test_fixture_arrangement_replays_in_order(self, fixture_config_dir: Path) -> None:
        """Loaded sequence matches like a hand-built one."""
        write = load_arrangement("mixed_write", config_dir=fixture_config_dir)["write"]
        assert write.match_and_consume() == StubbedError()
        assert write.match_and_consume() is None
        assert write.match_and_consume() is None
        for _ in range(5):
            assert write.match_and_consume() == StubIoError(errno.EIO)

    def test_loaded_values_are_fresh_per_load(self, fixture_config_dir: Path) -> None:
        """Two loads do not share sequences."""
        first = load_arrangement("mixed_write", config_dir=fixture_config_dir)["write"]
        second = load_arrangement("mixed_write", config_dir=fixture_config_dir)["write"]
        first.match_and_consume()
        assert [spec.remaining for spec in second] == [1, 2, None]

    def test_parameterized_results(self) -> None:
        sequences = load_arrangement("i2c_sensor_readout")
        read = sequences["read"]
        error = read.match_and_consume()
        assert isinstance(error, StubIoError)
        assert error.errno == 121
        assert read.match_and_consume() == b"\x01\xa4"

    def test_unknown_arrangement_raises(self) -> None:
        with pytest.raises(ArrangementError, match="not found"):
            load_arrangement("nonexistent_arrangement")

    def test_missing_file_in_config_dir_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ArrangementError, match="not found"):
            load_arrangement("missing", config_dir=tmp_path)

    @pytest.mark.asyncio
    async def test_aload_matches_load(self, fixture_config_dir: Path) -> None:
        """aload_arrangement reads the same file via aiofiles."""
        sequences = await aload_arrangement("transfer_bytes", config_dir=fixture_config_dir)
        transfer = sequences["transfer"]
        assert transfer.match_and_consume() == b"\xa1\xb2\xc3"
        assert transfer.match_and_consume() == b"\xa1\xb2\xc3"
        with pytest.raises(ResponsesExhaustedError):
            transfer.match_and_consume()

    @pytest.mark.asyncio
    async def test_aload_packaged_arrangement(self) -> None:
        sequences = await aload_arrangement("spi_flaky_write")
        assert "write" in sequences


class TestArrangementValidation:
    """Tests for schema validation and ArrangementError."""

    def test_invalid_yaml_raises(self) -> None:
        with pytest.raises(ArrangementError, match="Invalid YAML"):
            parse_arrangement("bad", "not: valid: yaml: [")

    def test_empty_document_raises(self) -> None:
        with pytest.raises(ArrangementError, match="empty"):
            parse_arrangement("empty", "")

    def test_empty_mapping_raises(self) -> None:
        with pytest.raises(ArrangementError, match="empty"):
            parse_arrangement("empty", "{}")

    def test_non_mapping_root_raises(self) -> None:
        with pytest.raises(ArrangementError, match="must be a mapping"):
            parse_arrangement("list", "- write\n")

    def test_empty_response_list_raises(self) -> None:
        with pytest.raises(ArrangementError, match="non-empty list"):
            parse_arrangement("no_responses", "write: []\n")

    def test_zero_times_raises(self, fixture_config_dir: Path) -> None:
        """A repeat count of zero is rejected at load time."""
        with pytest.raises(ArrangementError, match="Failed to parse"):
            load_arrangement("zero_times", config_dir=fixture_config_dir)

    def test_repeat_and_times_together_raise(self, fixture_config_dir: Path) -> None:
        with pytest.raises(ArrangementError, match="exactly one of"):
            load_arrangement("two_policies", config_dir=fixture_config_dir)

    def test_missing_repeat_policy_raises(self) -> None:
        with pytest.raises(ArrangementError, match="exactly one of"):
            parse_arrangement("no_policy", "write:\n  - result: ok\n")

    def test_unknown_result_raises(self, fixture_config_dir: Path) -> None:
        with pytest.raises(ArrangementError, match="Unknown result 'timeout'"):
            load_arrangement("unknown_result", config_dir=fixture_config_dir)

    def test_invalid_hex_raises(self) -> None:
        content = 'read:\n  - result: {type: bytes, hex: "xyz"}\n    repeat: once\n'
        with pytest.raises(ArrangementError, match="Failed to parse"):
            parse_arrangement("bad_hex", content)

    def test_unknown_field_raises(self) -> None:
        content = "write:\n  - result: ok\n    repeat: once\n    delay: 5\n"
        with pytest.raises(ArrangementError, match="Failed to parse"):
            parse_arrangement("extra", content)

    @pytest.mark.parametrize(
        "result",
        [
            "{type: io_error, errorno: 5}",
            '{type: bytes, hex: "01", length: 1}',
        ],
    )
    def test_unknown_result_parameter_raises(self, result: str) -> None:
        """A misspelled result parameter is rejected, not ignored."""
        content = f"read:\n  - result: {result}\n    repeat: once\n"
        with pytest.raises(ArrangementError, match="Failed to parse"):
            parse_arrangement("typo", content)
