"""Tests for the high-level solve API."""

import pytest
import torch

import kryshift as ks


class TestMethodSelection:
    """Test automatic and explicit method selection."""

    def test_auto_with_shifts_uses_cg_m(self) -> None:
        """Test that passing sigma selects CG-M and returns a StackedVector."""
        A = ks.poisson2d(5, 5)
        b = torch.ones(25, dtype=torch.float64)

        x, info = ks.solve(A, b, sigma=[0.0, 0.5, 2.0], tol=1e-10)

        assert isinstance(x, ks.StackedVector)
        assert info.method == "cg_m"
        assert info.n_shifts == 3
        assert info.converged
        assert info.final_residual <= 1e-10

        dense = A.matrix.to_dense()
        eye = torch.eye(25, dtype=torch.float64)
        for i, s in enumerate([0.0, 0.5, 2.0]):
            expected = torch.linalg.solve(dense + s * eye, b)
            error = torch.linalg.vector_norm(x.block(i) - expected).item()
            assert error < 1e-8 * torch.linalg.vector_norm(expected).item()

    def test_auto_hermitian_uses_cg(self) -> None:
        """Test that hermitian=True without shifts selects CG."""
        A = ks.poisson1d(20)
        b = torch.ones(20, dtype=torch.float64)

        x, info = ks.solve(A, b, hermitian=True, tol=1e-10)

        assert info.method == "cg"
        assert info.n_shifts == 1
        assert info.converged
        assert isinstance(x, torch.Tensor)
        assert torch.allclose(A.matvec(x), b, atol=1e-8)

    def test_auto_default_uses_bicgstab(self) -> None:
        """Test that the fallback method is BiCGStab."""
        torch.manual_seed(40)
        A = torch.randn(15, 15, dtype=torch.float64) / 4.0
        A += 3.0 * torch.eye(15, dtype=torch.float64)
        b = torch.randn(15, dtype=torch.float64)

        x, info = ks.solve(A, b, tol=1e-12)

        assert info.method == "bicgstab"
        assert info.converged
        assert torch.allclose(x, torch.linalg.solve(A, b), atol=1e-9)

    def test_explicit_method_with_precond(self) -> None:
        """Test method="cg" with the diagonal preconditioner."""
        A = ks.poisson1d(30)
        b = torch.ones(30, dtype=torch.float64)

        x, info = ks.solve(A, b, method="cg", precond="diagonal", tol=1e-10)

        assert info.converged
        assert torch.allclose(A.matvec(x), b, atol=1e-8)


class TestOptions:
    """Test the keyword options of solve."""

    def test_maxiter_limits_iterations(self) -> None:
        """Test that maxiter caps the iterations and reports non-convergence."""
        A = ks.poisson1d(100)
        b = torch.ones(100, dtype=torch.float64)

        _, info = ks.solve(A, b, sigma=[0.0], maxiter=4)

        assert info.iters == 4
        assert not info.converged

    def test_atol_alone(self) -> None:
        """Test an absolute tolerance with zero relative tolerance."""
        A = ks.poisson1d(20)
        b = torch.ones(20, dtype=torch.float64)

        x, info = ks.solve(A, b, method="cg", tol=0.0, atol=1e-6)

        assert info.converged
        assert torch.linalg.vector_norm(b - A.matvec(x)).item() <= 1e-5

    def test_dtype_conversion(self) -> None:
        """Test that dtype converts the right-hand side and shifts."""
        A = ks.poisson1d(10, dtype=torch.complex128)
        b = torch.ones(10, dtype=torch.float64)

        x, info = ks.solve(
            ks.MatrixOperator(A.matrix.to_dense()),
            b,
            sigma=[0.0, 1.0],
            dtype=torch.complex128,
            tol=1e-10,
        )

        assert x.dtype == torch.complex128
        assert info.converged

    def test_info_fields(self) -> None:
        """Test the SolverInfo dataclass."""
        info = ks.SolverInfo(converged=True, iters=3, final_residual=1e-9, method="cg")
        assert info.n_shifts == 1
        assert "method='cg'" in repr(info)


class TestErrors:
    """Test argument validation of solve."""

    def test_unknown_method(self) -> None:
        """Test that an unknown method raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported method"):
            ks.solve(ks.poisson1d(4), torch.ones(4, dtype=torch.float64), method="gmres")

    def test_unknown_preconditioner(self) -> None:
        """Test that an unknown preconditioner raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported preconditioner"):
            ks.solve(ks.poisson1d(4), torch.ones(4, dtype=torch.float64), precond="ilu")

    def test_cg_m_rejects_preconditioner(self) -> None:
        """Test that CG-M cannot be preconditioned."""
        with pytest.raises(ValueError, match="not supported"):
            ks.solve(
                ks.poisson1d(4),
                torch.ones(4, dtype=torch.float64),
                sigma=[0.0],
                precond="diagonal",
            )

    def test_cg_m_requires_shifts(self) -> None:
        """Test that method="cg_m" without sigma raises."""
        with pytest.raises(ValueError, match="requires shifts"):
            ks.solve(ks.poisson1d(4), torch.ones(4, dtype=torch.float64), method="cg_m")

    def test_dimension_mismatch_propagates(self) -> None:
        """Test that solver preconditions surface through solve."""
        with pytest.raises(ks.DimensionMismatch):
            ks.solve(ks.poisson1d(4), torch.ones(5, dtype=torch.float64), sigma=[0.0])

    def test_complex_shifts_with_real_rhs(self) -> None:
        """Test that complex shifts with a real b raise instead of losing the imaginary part."""
        with pytest.raises(ValueError, match="Complex shifts"):
            ks.solve(ks.poisson1d(4), torch.ones(4, dtype=torch.float64), sigma=[0.5j])
