"""Board layout and mine placement."""
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Protocol, Set, Tuple

from minefield.cell import Cell, CellValue
from minefield.settings import Dimensions, FirstClickSetting

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """The only randomness the engine needs; ``random.Random`` satisfies it."""

    def randrange(self, stop: int) -> int:
        ...


def calculate_neighbors(index: int, width: int, height: int) -> FrozenSet[int]:
    """Indices of the up to eight cells touching ``index``."""
    row, col = divmod(index, width)
    neighbors = set()
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue
            new_row = row + dr
            new_col = col + dc
            if 0 <= new_row < height and 0 <= new_col < width:
                neighbors.add(new_row * width + new_col)
    return frozenset(neighbors)


@dataclass
class Board:
    """Cells in row-major order, their neighbor sets and where the mines are.

    Cells are only ever addressed by index so cascades never hold
    references into the list.
    """
    dimensions: Dimensions
    cells: List[Cell] = field(default_factory=list)
    neighbors: List[FrozenSet[int]] = field(default_factory=list)
    mine_indices: Tuple[int, ...] = ()
    generated: bool = False

    @classmethod
    def empty(cls, dimensions: Dimensions) -> 'Board':
        """A board of hidden placeholder cells waiting for the first click."""
        width, height = dimensions.width, dimensions.height
        return cls(
            dimensions=dimensions,
            cells=[Cell() for _ in range(dimensions.cell_count)],
            neighbors=[calculate_neighbors(i, width, height) for i in range(dimensions.cell_count)],
        )

    @property
    def width(self) -> int:
        return self.dimensions.width

    @property
    def height(self) -> int:
        return self.dimensions.height

    @property
    def mine_count(self) -> int:
        return self.dimensions.mines

    def __len__(self) -> int:
        return len(self.cells)

    def clear(self) -> None:
        for cell in self.cells:
            cell.reset()
        self.mine_indices = ()
        self.generated = False

    def index_of(self, row: int, col: int) -> Optional[int]:
        if 0 <= row < self.height and 0 <= col < self.width:
            return row * self.width + col
        return None

    def row_col(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.width)


def is_eligible(candidate: int, first_clicked_index: int, first_click_neighbors: FrozenSet[int],
                policy: FirstClickSetting) -> bool:
    """Whether the first-click policy lets ``candidate`` hold a mine."""
    if candidate == first_clicked_index:
        return policy == FirstClickSetting.ANY
    if policy == FirstClickSetting.ZERO and candidate in first_click_neighbors:
        return False
    return True


def generate(dimensions: Dimensions, first_clicked_index: int, policy: FirstClickSetting,
             rng: RandomSource) -> Board:
    """Place mines around the first click and number every other cell."""
    width, height, cell_count = dimensions.width, dimensions.height, dimensions.cell_count
    assert 0 <= first_clicked_index < cell_count, f"Index {first_clicked_index} is off the board"
    assert dimensions.mines < cell_count, "Generation needs at least one safe cell"

    first_click_neighbors = calculate_neighbors(first_clicked_index, width, height)
    # A tiny board may not have room for the zero guarantee; fall back to a safe first cell
    zero_region = len(first_click_neighbors) + 1
    if policy == FirstClickSetting.ZERO and dimensions.mines > cell_count - zero_region:
        logger.warning(
            f"{dimensions.mines} mines do not fit around a zero first click on "
            f"{width}x{height}, keeping only the clicked cell clear"
        )
        policy = FirstClickSetting.SAFE

    mines: Set[int] = set()
    while len(mines) < dimensions.mines:
        candidate = rng.randrange(cell_count)
        if candidate in mines:
            continue
        if not is_eligible(candidate, first_clicked_index, first_click_neighbors, policy):
            continue
        mines.add(candidate)

    cells: List[Cell] = []
    neighbors: List[FrozenSet[int]] = []
    for index in range(cell_count):
        cell_neighbors = calculate_neighbors(index, width, height)
        if index in mines:
            value = CellValue.MINE
        else:
            value = CellValue.from_count(len(cell_neighbors & mines))
        cells.append(Cell(value=value))
        neighbors.append(cell_neighbors)

    logger.debug(f"Generated {width}x{height} board with {len(mines)} mines, first click at {first_clicked_index}")

    return Board(
        dimensions=dimensions,
        cells=cells,
        neighbors=neighbors,
        mine_indices=tuple(sorted(mines)),
        generated=True,
    )
