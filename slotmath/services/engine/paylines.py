"""Default payline tables.

Line tables are configuration data; these are only used when a lines config
does not supply its own.
"""

# Standard 20 lines for 5x3
STANDARD_LINES_5X3: tuple[tuple[int, ...], ...] = (
    (1, 1, 1, 1, 1), (0, 0, 0, 0, 0), (2, 2, 2, 2, 2),  # rows
    (0, 1, 2, 1, 0), (2, 1, 0, 1, 2),  # V shapes
    (0, 0, 1, 2, 2), (2, 2, 1, 0, 0),  # diagonals
    (1, 0, 1, 2, 1), (1, 2, 1, 0, 1),  # M/W
    (0, 1, 0, 1, 0), (2, 1, 2, 1, 2),  # alternating
    (1, 0, 0, 0, 1), (1, 2, 2, 2, 1),  # valleys/hills
    (0, 1, 1, 1, 0), (2, 1, 1, 1, 2),
    (0, 2, 0, 2, 0), (2, 0, 2, 0, 2),  # deep alternating
    (0, 2, 2, 2, 0), (2, 0, 0, 0, 2),
    (0, 0, 2, 0, 0),
)

DEFAULT_LINE_COUNT = 20


def generate_paylines(payline_count: int, reel_count: int, row_count: int) -> list[list[int]]:
    """Generate simple deterministic paylines.

    Each payline = list[row_index_per_reel]. Duplicates are dropped, so small
    grids may get fewer lines than requested.
    """
    if payline_count <= 0 or reel_count <= 0 or row_count <= 0:
        return []

    mid = row_count // 2

    # baseline patterns
    base_patterns: list[list[int]] = [[mid] * reel_count]  # straight middle
    if row_count >= 2:
        base_patterns.append([0] * reel_count)  # top
        base_patterns.append([row_count - 1] * reel_count)  # bottom
    if row_count >= 3 and reel_count >= 5:
        base_patterns.append([0, 1, 2, 1, 0] + [0] * (reel_count - 5))  # V
        base_patterns.append([2, 1, 0, 1, 2] + [2] * (reel_count - 5))  # inverted V

    lines: list[list[int]] = []
    seen: set[tuple[int, ...]] = set()

    def add(line: list[int]) -> None:
        key = tuple(line)
        if key not in seen:
            seen.add(key)
            lines.append(line)

    # diagonal / zigzag variants fill the rest
    i = 0
    while len(lines) < payline_count and i < payline_count * 4:
        if i < len(base_patterns):
            add(base_patterns[i])
        else:
            mode = i % 4
            line: list[int] = []
            for col in range(reel_count):
                if mode == 0:
                    row = col % row_count
                elif mode == 1:
                    row = (row_count - 1 - col) % row_count
                elif mode == 2:
                    row = (mid + (-1) ** col) % row_count
                else:
                    row = (mid + (1 if col % 3 == 0 else -1)) % row_count
                line.append(row)
            add(line)
        i += 1
    return lines


def default_lines(rows: int, cols: int) -> list[list[int]]:
    if rows == 3 and cols == 5:
        return [list(line) for line in STANDARD_LINES_5X3]
    return generate_paylines(DEFAULT_LINE_COUNT, cols, rows)
