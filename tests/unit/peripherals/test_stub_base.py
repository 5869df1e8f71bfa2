"""Unit tests for peripherals.base (StubArrangement, StubRunner, fill_buffer)."""

import pytest

from hal_stubs.error import ArrangementError, ResponsesExhaustedError, StubbedError
from hal_stubs.peripherals.base import StubArrangement, StubRunner, fill_buffer
from hal_stubs.returns import returns


class ResetPinStub(StubArrangement):
    """Minimal stub with a single operation, the way a new peripheral is added."""

    OPERATIONS = ("pulse",)

    def pulse(self, responses):  # noqa: ANN001, ANN201
        return self.program("pulse", responses)

    def go(self) -> StubRunner:
        return StubRunner(self._bind())


class TestStubArrangement:
    """Tests for the arrange phase."""

    def test_unprogrammed_operation_defaults_to_success(self) -> None:
        runner = ResetPinStub.arrange().go()
        for _ in range(5):
            assert runner._respond("pulse") is None

    def test_program_unknown_operation_raises(self) -> None:
        with pytest.raises(ArrangementError, match="Unknown operation"):
            ResetPinStub.arrange().program("hold", returns(None).once())

    def test_program_rejects_non_sequence(self) -> None:
        with pytest.raises(ArrangementError, match="needs a ResponseSequence"):
            ResetPinStub.arrange().program("pulse", None)  # type: ignore[arg-type]

    def test_program_rejects_exception_class(self) -> None:
        """An exception class would be returned as data instead of raised."""
        sequence = returns(None).once().returns(StubbedError).always()
        with pytest.raises(ArrangementError, match="class StubbedError"):
            ResetPinStub.arrange().pulse(sequence)

    def test_program_returns_arrangement_for_chaining(self) -> None:
        arrangement = ResetPinStub.arrange()
        assert arrangement.pulse(returns(None).once()) is arrangement

    def test_runner_sequences_are_named_after_stub_and_operation(self) -> None:
        runner = ResetPinStub.arrange().go()
        assert runner.sequence("pulse").name == "ResetPinStub.pulse"


class TestStubRunner:
    """Tests for the go phase."""

    def test_exception_results_are_raised(self) -> None:
        runner = ResetPinStub.arrange().pulse(returns(StubbedError("boom")).once()).go()
        with pytest.raises(StubbedError, match="boom"):
            runner._respond("pulse")

    def test_other_results_are_returned(self) -> None:
        runner = ResetPinStub.arrange().pulse(returns({"level": 1}).once()).go()
        assert runner._respond("pulse") == {"level": 1}

    def test_exhaustion_propagates(self) -> None:
        runner = ResetPinStub.arrange().pulse(returns(None).once()).go()
        runner._respond("pulse")
        with pytest.raises(ResponsesExhaustedError):
            runner._respond("pulse")

    def test_arrangement_changes_after_go_do_not_affect_runner(self) -> None:
        """go() freezes the arrangement."""
        arrangement = ResetPinStub.arrange()
        runner = arrangement.go()
        arrangement.pulse(returns(StubbedError()).always())
        assert runner._respond("pulse") is None


class TestFillBuffer:
    """Tests for fill_buffer."""

    def test_none_leaves_buffer(self) -> None:
        buffer = bytearray(b"\x01\x02")
        assert fill_buffer(buffer, None) == b"\x01\x02"
        assert buffer == bytearray(b"\x01\x02")

    def test_short_data_fills_prefix(self) -> None:
        buffer = bytearray(3)
        assert fill_buffer(buffer, b"\xff") == b"\xff\x00\x00"

    def test_immutable_buffer_returns_data(self) -> None:
        assert fill_buffer(b"\x00", b"\x01\x02") == b"\x01\x02"

    def test_bytearray_and_memoryview_data(self) -> None:
        assert fill_buffer(bytearray(2), bytearray(b"\x05")) == b"\x05\x00"
        assert fill_buffer(bytearray(1), memoryview(b"\x06")) == b"\x06"

    @pytest.mark.parametrize("data", [3, "ab", [1, 2]])
    def test_non_bytes_data_raises(self, data: object) -> None:
        """An int would otherwise become that many zero bytes."""
        buffer = bytearray(b"\x01\x02\x03")
        with pytest.raises(ArrangementError, match="must be bytes"):
            fill_buffer(buffer, data)  # type: ignore[arg-type]
        assert buffer == bytearray(b"\x01\x02\x03")
