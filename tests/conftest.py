import pytest

from gomoku.game import BOARD_SIZE


@pytest.fixture
def no_win_moves() -> list[tuple[int, int]]:
    """All 225 cells in an alternating black/white order that never makes five.

    Black owns cells where (col + 2*row) % 4 < 2. Rows and diagonals then hold
    runs of at most two, and columns alternate. Black gets 113 cells, white 112,
    so black also plays the final move.
    """
    black, white = [], []
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if (col + 2 * row) % 4 < 2:
                black.append((row, col))
            else:
                white.append((row, col))

    moves = []
    for i, cell in enumerate(black):
        moves.append(cell)
        if i < len(white):
            moves.append(white[i])
    return moves
