"""Tests for the single-system Krylov solvers (CG and BiCGStab).

Solutions are compared against dense ``torch.linalg.solve`` references.
"""

import logging

import pytest
import torch

import kryshift as ks


def _rel_error(actual: torch.Tensor, expected: torch.Tensor) -> float:
    """Return ||actual - expected|| / ||expected||."""
    return (torch.linalg.vector_norm(actual - expected) / torch.linalg.vector_norm(expected)).item()


def _nonsymmetric_system(n: int, dtype: torch.dtype, seed: int) -> tuple:
    """Return a diagonally dominant non-symmetric matrix and a right-hand side."""
    torch.manual_seed(seed)
    A = torch.randn(n, n, dtype=dtype) / n**0.5 + 4.0 * torch.eye(n, dtype=dtype)
    b = torch.randn(n, dtype=dtype)
    return A, b


class TestCG:
    """Test preconditioned CG."""

    def test_matches_dense_solve(self) -> None:
        """Test CG on the 2-D Laplacian."""
        A = ks.poisson2d(6, 6)
        torch.manual_seed(20)
        b = torch.randn(36, dtype=torch.float64)
        x = torch.zeros(36, dtype=torch.float64)

        monitor = ks.cg(A, x, b, ks.DefaultMonitor(b, relative_tolerance=1e-12))

        expected = torch.linalg.solve(A.matrix.to_dense(), b)
        assert monitor.converged()
        assert _rel_error(x, expected) < 1e-9

    def test_default_monitor(self) -> None:
        """Test that the default tolerance is met without a monitor."""
        A = ks.poisson1d(30)
        b = torch.ones(30, dtype=torch.float64)
        x = torch.zeros(30, dtype=torch.float64)

        monitor = ks.cg(A, x, b)

        assert monitor.converged()
        assert monitor.tolerance() == pytest.approx(1e-5 * 30**0.5)
        residual = torch.linalg.vector_norm(b - A.matvec(x)).item()
        assert residual <= 10.0 * monitor.tolerance()

    def test_jacobi_preconditioner(self) -> None:
        """Test CG with a diagonal preconditioner on a badly scaled SPD matrix."""
        torch.manual_seed(21)
        n = 25
        scale = torch.logspace(0, 3, n, dtype=torch.float64)
        L = ks.poisson1d(n).matrix.to_dense()
        A = torch.diag(scale.sqrt()) @ (L + torch.eye(n, dtype=torch.float64)) @ torch.diag(
            scale.sqrt()
        )
        b = torch.randn(n, dtype=torch.float64)

        x_plain = torch.zeros(n, dtype=torch.float64)
        plain = ks.cg(A, x_plain, b, ks.DefaultMonitor(b, relative_tolerance=1e-10))

        x_prec = torch.zeros(n, dtype=torch.float64)
        prec = ks.cg(
            A,
            x_prec,
            b,
            ks.DefaultMonitor(b, relative_tolerance=1e-10),
            ks.DiagonalPreconditioner(A),
        )

        expected = torch.linalg.solve(A, b)
        assert prec.converged()
        assert prec.iteration_count <= plain.iteration_count
        assert _rel_error(x_prec, expected) < 1e-5

    def test_uses_initial_guess(self) -> None:
        """Test that starting from the solution finishes immediately."""
        A = ks.poisson1d(10)
        x_true = torch.linspace(0.0, 1.0, 10, dtype=torch.float64)
        b = A.matvec(x_true)
        x = x_true.clone()

        monitor = ks.cg(A, x, b)

        assert monitor.iteration_count == 0
        assert torch.equal(x, x_true)

    def test_dimension_mismatch(self) -> None:
        """Test that x and b of different length are rejected."""
        with pytest.raises(ks.DimensionMismatch):
            ks.cg(ks.poisson1d(4), torch.zeros(5), torch.ones(4))

    def test_preconditioner_shape_mismatch(self) -> None:
        """Test that a preconditioner of the wrong size is rejected."""
        with pytest.raises(ks.DimensionMismatch):
            ks.cg(
                ks.poisson1d(4),
                torch.zeros(4, dtype=torch.float64),
                torch.ones(4, dtype=torch.float64),
                None,
                ks.IdentityPreconditioner(5),
            )

    def test_verbose_with_caller_monitor(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test cg(A, x, b, monitor, M, verbose=1) logs progress and the summary."""
        caplog.set_level(logging.INFO, logger="kryshift")
        A = ks.poisson1d(20)
        b = torch.ones(20, dtype=torch.float64)
        x = torch.zeros(20, dtype=torch.float64)

        monitor = ks.cg(A, x, b, ks.DefaultMonitor(b, iteration_limit=2), None, 1)

        messages = [record.getMessage() for record in caplog.records]
        assert not monitor.converged()
        assert any("Solver will continue until" in m for m in messages)
        assert any(
            r.levelno == logging.WARNING and "Failed to converge after 2" in r.getMessage()
            for r in caplog.records
        )


class TestBiCGStab:
    """Test right-preconditioned BiCGStab."""

    def test_default_call(self) -> None:
        """Test bicgstab(A, x, b) with the default monitor."""
        A, b = _nonsymmetric_system(30, torch.float64, seed=30)
        x = torch.zeros(30, dtype=torch.float64)

        monitor = ks.bicgstab(A, x, b)

        assert monitor.converged()
        residual = torch.linalg.vector_norm(b - A @ x).item()
        assert residual <= 10.0 * monitor.tolerance()

    def test_monitor_call(self) -> None:
        """Test bicgstab(A, x, b, monitor) against a dense solve."""
        A, b = _nonsymmetric_system(30, torch.float64, seed=31)
        x = torch.zeros(30, dtype=torch.float64)

        monitor = ks.bicgstab(A, x, b, ks.DefaultMonitor(b, relative_tolerance=1e-12))

        assert monitor.converged()
        assert _rel_error(x, torch.linalg.solve(A, b)) < 1e-10

    def test_preconditioned_call(self) -> None:
        """Test bicgstab(A, x, b, monitor, M, verbose) with Jacobi."""
        A, b = _nonsymmetric_system(30, torch.float64, seed=32)
        A = A + torch.diag(torch.linspace(0.0, 50.0, 30, dtype=torch.float64))
        x = torch.zeros(30, dtype=torch.float64)

        monitor = ks.bicgstab(
            A,
            x,
            b,
            ks.DefaultMonitor(b, relative_tolerance=1e-12),
            ks.DiagonalPreconditioner(A),
            0,
        )

        assert monitor.converged()
        assert _rel_error(x, torch.linalg.solve(A, b)) < 1e-10

    def test_complex_system(self) -> None:
        """Test a complex non-Hermitian system."""
        A, b = _nonsymmetric_system(20, torch.complex128, seed=33)
        x = torch.zeros(20, dtype=torch.complex128)

        monitor = ks.bicgstab(A, x, b, ks.DefaultMonitor(b, relative_tolerance=1e-12))

        assert monitor.converged()
        assert _rel_error(x, torch.linalg.solve(A, b)) < 1e-10

    def test_sparse_operator(self) -> None:
        """Test BiCGStab on a sparse convection-diffusion matrix."""
        n = 40
        L = ks.poisson1d(n).matrix.to_dense()
        C = torch.diag(torch.full((n - 1,), 0.5, dtype=torch.float64), 1) - torch.diag(
            torch.full((n - 1,), 0.5, dtype=torch.float64), -1
        )
        dense = L + C + 0.1 * torch.eye(n, dtype=torch.float64)
        A = ks.MatrixOperator(dense.to_sparse_csr())
        b = torch.ones(n, dtype=torch.float64)
        x = torch.zeros(n, dtype=torch.float64)

        monitor = ks.bicgstab(A, x, b, ks.DefaultMonitor(b, relative_tolerance=1e-10))

        assert monitor.converged()
        assert _rel_error(x, torch.linalg.solve(dense, b)) < 1e-7

    def test_verbose_logs_progress(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that verbose=1 reports progress through logging."""
        caplog.set_level(logging.INFO, logger="kryshift")
        A, b = _nonsymmetric_system(10, torch.float64, seed=34)
        x = torch.zeros(10, dtype=torch.float64)

        monitor = ks.bicgstab(A, x, b, verbose=1)

        messages = [record.getMessage() for record in caplog.records]
        assert isinstance(monitor, ks.VerboseMonitor)
        assert any("Solver will continue until" in m for m in messages)
        assert any("Successfully converged" in m for m in messages)

    def test_verbose_with_caller_monitor(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test bicgstab(A, x, b, monitor, M, verbose=1) logs progress for any monitor."""
        caplog.set_level(logging.INFO, logger="kryshift")
        A, b = _nonsymmetric_system(10, torch.float64, seed=36)
        x = torch.zeros(10, dtype=torch.float64)
        criteria = ks.DefaultMonitor(b, relative_tolerance=1e-10)

        monitor = ks.bicgstab(A, x, b, criteria, ks.DiagonalPreconditioner(A), 1)

        messages = [record.getMessage() for record in caplog.records]
        assert monitor is criteria
        assert monitor.converged()
        assert any("Solver will continue until" in m for m in messages)
        assert any("Successfully converged" in m for m in messages)
        # one line per check: iterations 0..n
        progress = [m for m in messages if m.strip().split()[0].isdigit()]
        assert len(progress) == monitor.iteration_count + 1

    def test_quiet_with_caller_monitor(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that verbose=0 logs nothing at INFO."""
        caplog.set_level(logging.INFO, logger="kryshift")
        A, b = _nonsymmetric_system(10, torch.float64, seed=37)
        x = torch.zeros(10, dtype=torch.float64)

        ks.bicgstab(A, x, b, ks.DefaultMonitor(b), None, 0)

        assert not [r for r in caplog.records if r.levelno >= logging.INFO]

    def test_iteration_limit(self) -> None:
        """Test that non-convergence is reported by the monitor, not raised."""
        A, b = _nonsymmetric_system(30, torch.float64, seed=35)
        x = torch.zeros(30, dtype=torch.float64)

        monitor = ks.bicgstab(
            A, x, b, ks.DefaultMonitor(b, iteration_limit=1, relative_tolerance=1e-12)
        )

        assert monitor.iteration_count == 1
        assert not monitor.converged()

    def test_memory_space_mismatch(self) -> None:
        """Test that operands on different devices are rejected."""
        A = ks.IdentityOperator(3)
        with pytest.raises(ks.MemorySpaceMismatch):
            ks.bicgstab(A, torch.zeros(3, device="meta"), torch.ones(3, dtype=torch.float64))
