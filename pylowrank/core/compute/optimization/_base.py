"""
Shared optimizer contract: cost functions and per-step states.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Protocol, runtime_checkable
import numpy as np
from numpy.typing import ArrayLike, NDArray


@runtime_checkable
class CostFunction(Protocol):
    """
    Differentiable objective.

    ``cost(x)`` returns ``(value, gradient)``; ``cost.only_value(x)``
    returns the value alone and may skip the gradient computation.
    """

    def __call__(self, x: NDArray[np.floating[Any]]) -> tuple[float, NDArray[np.floating[Any]]]:
        ...

    def only_value(self, x: NDArray[np.floating[Any]]) -> float:
        ...


@dataclass(frozen=True)
class OptimizerState:
    """
    One step of an optimizer.

    Attributes:
        iteration: Step index, starting at 0
        value: Objective value at the point the gradient was taken
        gradient: Gradient at that point
        parameters: Parameters after the step
        step_length: Step length used for this step
    """
    iteration: int
    value: float
    gradient: NDArray[np.floating[Any]]
    parameters: NDArray[np.floating[Any]]
    step_length: float


class Optimizer:
    """
    Base class: subclasses yield one OptimizerState per step.

    The driver loop belongs to the caller; ``minimize`` is the loop that
    just runs to the end.
    """

    def iterations(self, x0: ArrayLike, cost: CostFunction) -> Iterator[OptimizerState]:
        raise NotImplementedError

    def minimize(self, x0: ArrayLike, cost: CostFunction) -> NDArray[np.floating[Any]]:
        """Run all iterations and return the final parameters."""
        state = None
        for state in self.iterations(x0, cost):
            pass
        if state is None:
            return np.array(x0, dtype=np.float64)
        return state.parameters


def as_parameters(x0: ArrayLike) -> NDArray[np.floating[Any]]:
    """Float64 1D copy of the initial parameters."""
    x = np.array(x0, dtype=np.float64)
    if x.ndim != 1:
        x = x.ravel()
    return x
