"""Latest gesture label per hand slot, replaced wholesale every frame."""

from typing import Iterable, Iterator, List, Tuple

from .classifier import GestureLabel


class PerHandState:
    """
    Ordered mapping of hand slot index -> GestureLabel.

    Slot indices follow the order in which the detector reported hands for
    the current frame only; they are not stable identities across frames.
    There is no smoothing, so labels can flicker from frame to frame.
    """

    def __init__(self):
        self._labels: List[GestureLabel] = []

    def replace(self, labels: Iterable[GestureLabel]) -> None:
        """Drop the previous frame's labels and store the new ones."""
        self._labels = list(labels)

    def clear(self) -> None:
        self._labels = []

    def get(self, slot: int) -> GestureLabel:
        """Label for a slot, NONE if the slot was not reported this frame."""
        if 0 <= slot < len(self._labels):
            return self._labels[slot]
        return GestureLabel.NONE

    def items(self) -> Iterator[Tuple[int, GestureLabel]]:
        return iter(enumerate(self._labels))

    def as_list(self) -> List[GestureLabel]:
        return list(self._labels)

    def __getitem__(self, slot: int) -> GestureLabel:
        return self._labels[slot]

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[GestureLabel]:
        return iter(self._labels)

    def __repr__(self) -> str:
        return f"PerHandState({[label.value for label in self._labels]})"
