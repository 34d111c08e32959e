"""
Gradient descent with a fixed, line-searched or decaying step length.
"""

from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylowrank.core.exceptions import ValidationError
from pylowrank.core.validation import check_positive, check_positive_int
from pylowrank.core.compute.optimization._base import (
    CostFunction,
    Optimizer,
    OptimizerState,
    as_parameters,
)


GOLDEN_RATIO = 0.618
LINE_SEARCH_POINTS = 8


@dataclass(frozen=True)
class GradientDescentConfiguration:
    """
    Attributes:
        num_iterations: Number of descent steps
        step_length: Fixed step, or the upper end of the line search interval,
            or the numerator of the Robbins-Monro schedule
        with_line_search: Golden-section search for the step in [0, step_length]
        robbins_monro: Decaying step
            step_length / (iteration + 0.1 * num_iterations) ** step_decrease_coeff
        step_decrease_coeff: Exponent of the Robbins-Monro schedule
    """
    num_iterations: int
    step_length: float
    with_line_search: bool = False
    robbins_monro: bool = False
    step_decrease_coeff: float = 0.0

    def __post_init__(self):
        check_positive_int(self.num_iterations, 'num_iterations')
        check_positive(self.step_length, 'step_length')
        if self.with_line_search and self.robbins_monro:
            raise ValidationError(
                "with_line_search and robbins_monro are mutually exclusive"
            )
        if self.step_decrease_coeff < 0:
            raise ValidationError(
                f"step_decrease_coeff: must be >= 0, got {self.step_decrease_coeff}"
            )


def golden_section_line_search(
    n_points: int,
    x: NDArray[np.floating[Any]],
    lower: float,
    upper: float,
    direction: NDArray[np.floating[Any]],
    cost: CostFunction,
) -> float:
    """
    Step t in [lower, upper] minimizing cost.only_value(x + t * direction).

    Shrinks the bracket with the golden ratio for ``n_points`` evaluations
    and returns the best evaluated step.
    """
    ll, ul = lower, upper
    b = ll + (1 - GOLDEN_RATIO) * (ul - ll)
    c = ll + GOLDEN_RATIO * (ul - ll)
    fb = cost.only_value(x + direction * b)
    fc = cost.only_value(x + direction * c)
    steps = [b, c]
    values = [fb, fc]

    for _ in range(2, n_points):
        if fb > fc:
            ll = b
            b, fb = c, fc
            c = ll + GOLDEN_RATIO * (ul - ll)
            fc = cost.only_value(x + direction * c)
            steps.append(c)
            values.append(fc)
        else:
            ul = c
            c, fc = b, fb
            b = ll + (1 - GOLDEN_RATIO) * (ul - ll)
            fb = cost.only_value(x + direction * b)
            steps.append(b)
            values.append(fb)

    return float(steps[int(np.argmin(values))])


class GradientDescentOptimizer(Optimizer):
    """
    Plain gradient descent.

    Yields one state per step; the last state (iteration == num_iterations)
    reports the value and gradient at the final parameters.
    """

    def __init__(self, configuration: GradientDescentConfiguration):
        self.configuration = configuration

    def _step(
        self,
        iteration: int,
        x: NDArray[np.floating[Any]],
        gradient: NDArray[np.floating[Any]],
        cost: CostFunction,
    ) -> float:
        config = self.configuration
        if config.with_line_search:
            return golden_section_line_search(
                LINE_SEARCH_POINTS, x, 0.0, config.step_length, -gradient, cost
            )
        if config.robbins_monro:
            return config.step_length / (
                iteration + config.num_iterations * 0.1
            ) ** config.step_decrease_coeff
        return config.step_length

    def iterations(self, x0: ArrayLike, cost: CostFunction) -> Iterator[OptimizerState]:
        config = self.configuration
        x = as_parameters(x0)

        for iteration in range(config.num_iterations):
            value, gradient = cost(x)
            gradient = np.asarray(gradient, dtype=np.float64)
            step = self._step(iteration, x, gradient, cost)
            x = x - gradient * step
            yield OptimizerState(
                iteration=iteration,
                value=float(value),
                gradient=gradient,
                parameters=x,
                step_length=step,
            )

        value, gradient = cost(x)
        yield OptimizerState(
            iteration=config.num_iterations,
            value=float(value),
            gradient=np.asarray(gradient, dtype=np.float64),
            parameters=x,
            step_length=0.0,
        )
