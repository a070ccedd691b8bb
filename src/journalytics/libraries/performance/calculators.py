"""Stateful walkers shared by the chronological builders.

Each calculator consumes net P/L values one trade at a time, in chronological
order, and exposes the running state. The pure builders in `metrics`,
`series` and `segments` create a fresh calculator per call, so no state
survives between computations.

Usage:
    >>> from journalytics.libraries.performance.calculators import DrawdownCalculator
    >>> calc = DrawdownCalculator()
    >>> for pl in (Decimal("100"), Decimal("-50"), Decimal("100")):
    ...     calc.update(pl)
    >>> calc.max_drawdown
    Decimal('50')
"""

from decimal import Decimal


class DrawdownCalculator:
    """
    Tracks cumulative P/L, its running peak and drawdown from that peak.

    The peak starts at zero (flat account), so a losing first trade is
    already a drawdown.
    """

    def __init__(self) -> None:
        self._cumulative = Decimal("0")
        self._peak = Decimal("0")
        self._max_drawdown = Decimal("0")

    def update(self, pl: Decimal) -> Decimal:
        """
        Apply one trade's P/L.

        Args:
            pl: Net P/L of the next trade in chronological order

        Returns:
            Current drawdown (peak - cumulative), always >= 0
        """
        self._cumulative += pl
        if self._cumulative > self._peak:
            self._peak = self._cumulative

        drawdown = self._peak - self._cumulative
        if drawdown > self._max_drawdown:
            self._max_drawdown = drawdown
        return drawdown

    @property
    def cumulative(self) -> Decimal:
        return self._cumulative

    @property
    def peak(self) -> Decimal:
        return self._peak

    @property
    def current_drawdown(self) -> Decimal:
        return self._peak - self._cumulative

    @property
    def max_drawdown(self) -> Decimal:
        return self._max_drawdown


class StreakCalculator:
    """
    Tracks runs of consecutive wins and losses.

    A breakeven trade ends whichever streak is running and starts neither,
    so [+1, +1, 0, +1] has a best win streak of 2.
    """

    def __init__(self) -> None:
        self._current_wins = 0
        self._current_losses = 0
        self._win_streaks: list[int] = []
        self._loss_streaks: list[int] = []

    def update(self, pl: Decimal) -> None:
        if pl > 0:
            self._close_losses()
            self._current_wins += 1
        elif pl < 0:
            self._close_wins()
            self._current_losses += 1
        else:
            self._close_wins()
            self._close_losses()

    def _close_wins(self) -> None:
        if self._current_wins > 0:
            self._win_streaks.append(self._current_wins)
            self._current_wins = 0

    def _close_losses(self) -> None:
        if self._current_losses > 0:
            self._loss_streaks.append(self._current_losses)
            self._current_losses = 0

    @property
    def win_streaks(self) -> list[int]:
        """Completed win streaks plus the ongoing one."""
        if self._current_wins:
            return [*self._win_streaks, self._current_wins]
        return list(self._win_streaks)

    @property
    def loss_streaks(self) -> list[int]:
        """Completed loss streaks plus the ongoing one."""
        if self._current_losses:
            return [*self._loss_streaks, self._current_losses]
        return list(self._loss_streaks)

    @property
    def current(self) -> int:
        """Signed length of the ongoing streak (0 after a breakeven trade)."""
        if self._current_wins:
            return self._current_wins
        return -self._current_losses
