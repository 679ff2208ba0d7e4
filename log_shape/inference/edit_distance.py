def levenshtein_distance(first, second) -> int:
    """
    Unit-cost insert/delete/substitute edit distance between two strings.

    Only two columns of the usual matrix are kept, sized by the shorter
    of the two strings.
    """
    if len(second) > len(first):
        first, second = second, first

    first_len = len(first)
    second_len = len(second)
    if first_len == 0:
        return second_len
    if second_len == 0:
        return first_len

    previous_col = [0] * (second_len + 1)
    current_col = list(range(second_len + 1))

    for across in range(1, first_len + 1):
        previous_col, current_col = current_col, previous_col
        current_col[0] = across
        first_char = first[across - 1]

        for down in range(1, second_len + 1):
            if first_char == second[down - 1]:
                current_col[down] = previous_col[down - 1]
            else:
                current_col[down] = (
                    min(
                        previous_col[down],  # deletion
                        current_col[down - 1],  # insertion
                        previous_col[down - 1],  # substitution
                    )
                    + 1
                )

    return current_col[second_len]
