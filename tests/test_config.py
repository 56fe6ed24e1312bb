"""Tests for package metadata, global configuration and the error taxonomy."""

import pytest
import torch

import kryshift as ks


def test_version_exists() -> None:
    """Test that version string is defined."""
    assert ks.__version__ is not None
    assert isinstance(ks.__version__, str)
    assert len(ks.__version__) > 0


class TestConfig:
    """Test the global configuration object."""

    def test_default_dtype(self) -> None:
        """Test that default dtype is float64."""
        assert torch.float64 == ks.config.DEFAULT_DTYPE

    def test_default_device(self) -> None:
        """Test that default device is CPU."""
        assert torch.device("cpu") == ks.config.DEFAULT_DEVICE

    def test_default_stopping_rule(self) -> None:
        """Test the default monitor parameters."""
        assert ks.config.ITERATION_LIMIT == 500
        assert ks.config.RELATIVE_TOLERANCE == 1e-5
        assert ks.config.ABSOLUTE_TOLERANCE == 0.0
        assert ks.config.CHECK_BREAKDOWN is False

    def test_reset(self) -> None:
        """Test that config reset restores every default."""
        ks.config.DEFAULT_DTYPE = torch.complex64
        ks.config.ITERATION_LIMIT = 3
        ks.config.CHECK_BREAKDOWN = True

        ks.config.reset()

        assert torch.float64 == ks.config.DEFAULT_DTYPE
        assert ks.config.ITERATION_LIMIT == 500
        assert ks.config.CHECK_BREAKDOWN is False

    def test_repr_lists_fields(self) -> None:
        """Test that repr shows the configured values."""
        text = repr(ks.config)
        assert "KryshiftConfig(" in text
        assert "ITERATION_LIMIT=500" in text
        assert "RELATIVE_TOLERANCE=1e-05" in text


class TestErrors:
    """Test the exception hierarchy."""

    def test_dimension_mismatch_is_value_error(self) -> None:
        """DimensionMismatch can be caught as ValueError."""
        assert issubclass(ks.DimensionMismatch, ValueError)
        assert issubclass(ks.DimensionMismatch, ks.KryshiftError)

    def test_memory_space_mismatch_is_value_error(self) -> None:
        """MemorySpaceMismatch can be caught as ValueError."""
        assert issubclass(ks.MemorySpaceMismatch, ValueError)
        assert issubclass(ks.MemorySpaceMismatch, ks.KryshiftError)

    def test_breakdown_error_attributes(self) -> None:
        """BreakdownError records the quantity and iteration."""
        err = ks.BreakdownError("pAp", 7)
        assert isinstance(err, ArithmeticError)
        assert err.quantity == "pAp"
        assert err.iteration == 7
        assert "pAp" in str(err)
        assert "7" in str(err)

    def test_not_available_error_message(self) -> None:
        """MemorySpaceNotAvailableError names the missing space."""
        err = ks.MemorySpaceNotAvailableError(ks.MemorySpace.DEVICE)
        assert err.space is ks.MemorySpace.DEVICE
        assert "DEVICE" in str(err)

        with pytest.raises(ks.KryshiftError):
            raise err
