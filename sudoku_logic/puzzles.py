"""Sample grids, selectable from the command line with ``-T n``."""

from __future__ import annotations
from typing import Dict, List


TEST_GRIDS: Dict[int, List[str]] = {
    9: [
        # Arto Inkala, "the world's hardest sudoku" (2012)
        "8........" "..36....." ".7..9.2.." ".5...7..." "....457.." "...1...3." "..1....68" "..85...1." ".9....4..",
        "000000010" "400000000" "020000000" "000050604" "008000300" "001090000" "300400200" "050100000" "000807000",
        "400009000" "030010020" "006700000" "001000004" "050200070" "800000600" "000004008" "070030010" "000500900",
        "2...84..." ".93......" ".819...73" "......2.." ".3.8....5" "71..5...." "9.7......" "....3.6.7" "..8.46...",
        "5.......9" ".2.1...7." "..8...3.." ".4...2..." "....5...." "...7.6.1." "..3...8.." ".6...4.2." "9.......5",
        "1.......2" ".9.4...5." "..6...7.." ".5.9.3..." "....7...." "...85..4." "7.....6.." ".3...9.8." "..2.....1",
        "7...85..." ".81......" ".43....59" "......3.1" "2..4..7.." ".3...7.9." ".15......" "....5.2.3" "....98...",
        # Same as above with two 7s in row A: no solution
        "7...85..7" ".81......" ".43....59" "......3.1" "2..4..7.." ".3...7.9." ".15......" "....5.2.3" "....98...",
        # Printed on a hotel brochure (fake sudoku)
        "76.5..2.." "1.2.4..78" "..4..851." ".....3..." "..71.2..." "9...876.." "..6....3." ".1.7..8.." ".43..9...",
    ],
    4: [
        "1234 4.2. .4.. 2..3",
    ],
    16: [
        "..f65ge7b.1..83..b..d.6.......ef8.......95.e4..7e..1.....f2..6..g6....da..fb.c..f....4951..28..e24..713....."
        "9g..3...e6.g..a..d.4a.8..5..f.3c...6..4b.....ad6..8g6..53..e298....1..9.6d..e4....c2..a..e1.....3..84..39.8d"
        ".......5d8.......e.7..f..9g..a.2584361..",
    ],
}


def sample_grid(number: int, size: int = 9) -> str:
    """
    Sample grid ``number`` (1-based) for grids of ``size`` x ``size``.

    Raises:
        ValueError: if there is no such grid.
    """
    grids = TEST_GRIDS.get(size, [])
    if not 1 <= number <= len(grids):
        raise ValueError(
            f"Invalid sample grid number {number}: valid values between 1 and {len(grids)}."
        )
    return grids[number - 1]
