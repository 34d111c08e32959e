"""
L-BFGS optimizer over a CostFunction.

Uses scipy.optimize.minimize(method='L-BFGS-B') with no bounds; the
callback records one OptimizerState per accepted iteration.
"""

import warnings
from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.optimize import minimize

from pylowrank.core.exceptions import ConvergenceError
from pylowrank.core.validation import check_positive, check_positive_int
from pylowrank.core.compute.optimization._base import (
    CostFunction,
    Optimizer,
    OptimizerState,
    as_parameters,
)


@dataclass(frozen=True)
class LBFGSConfiguration:
    """
    Attributes:
        num_iterations: Maximum number of L-BFGS iterations
        m: Number of correction pairs kept (history size)
        tolerance: Projected gradient tolerance
        raise_on_failure: Raise ConvergenceError instead of warning when
            the optimizer stops without converging
    """
    num_iterations: int
    m: int = 10
    tolerance: float = 1e-5
    raise_on_failure: bool = False

    def __post_init__(self):
        check_positive_int(self.num_iterations, 'num_iterations')
        check_positive_int(self.m, 'm')
        check_positive(self.tolerance, 'tolerance')


class LBFGSOptimizer(Optimizer):
    """
    Limited-memory BFGS.

    ``iterations`` yields the state at x0 (iteration 0, step length 0)
    followed by one state per L-BFGS iteration.
    """

    def __init__(self, configuration: LBFGSConfiguration):
        self.configuration = configuration

    def iterations(self, x0: ArrayLike, cost: CostFunction) -> Iterator[OptimizerState]:
        x = as_parameters(x0)
        value, gradient = cost(x)
        yield OptimizerState(
            iteration=0,
            value=float(value),
            gradient=np.asarray(gradient, dtype=np.float64),
            parameters=x.copy(),
            step_length=0.0,
        )
        yield from self._optimize(x, cost)

    def _optimize(
        self,
        x0: NDArray[np.floating[Any]],
        cost: CostFunction,
    ) -> list[OptimizerState]:
        config = self.configuration
        last: dict[str, Any] = {}

        def fun(x):
            value, gradient = cost(x)
            last['x'] = x.copy()
            last['value'] = float(value)
            last['gradient'] = np.asarray(gradient, dtype=np.float64)
            return last['value'], last['gradient']

        states: list[OptimizerState] = []
        previous = x0.copy()

        def callback(xk):
            nonlocal previous
            if 'x' in last and np.array_equal(last['x'], xk):
                value, gradient = last['value'], last['gradient']
            else:
                value, gradient = fun(xk)
            states.append(OptimizerState(
                iteration=len(states) + 1,
                value=value,
                gradient=gradient,
                parameters=np.array(xk, dtype=np.float64),
                step_length=float(np.linalg.norm(xk - previous)),
            ))
            previous = np.array(xk, dtype=np.float64)

        opt_result = minimize(
            fun,
            x0,
            jac=True,
            method='L-BFGS-B',
            callback=callback,
            options={
                'maxiter': config.num_iterations,
                'maxcor': config.m,
                'gtol': config.tolerance,
            },
        )

        if not opt_result.success:
            reason = 'max_iterations' if opt_result.status == 1 else 'abnormal'
            msg = f"L-BFGS did not converge: {opt_result.message}"
            if config.raise_on_failure:
                raise ConvergenceError(
                    msg,
                    iterations=int(opt_result.nit),
                    final_value=float(opt_result.fun),
                    reason=reason,
                )
            warnings.warn(msg, RuntimeWarning, stacklevel=3)

        return states
