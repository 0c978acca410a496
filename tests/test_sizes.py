from blessed_api.common.tools.sizes import size_sort_key, sort_sizes


def test_numeric_before_letters():
    assert sort_sizes(["L", "36", "XS", "42"]) == ["36", "42", "XS", "L"]


def test_numeric_sizes_sort_numerically():
    assert sort_sizes(["40", "8", "38.5", "100"]) == ["8", "38.5", "40", "100"]


def test_letter_sizes_follow_fixed_order_case_insensitive():
    assert sort_sizes(["xxl", "M", "xs", "XXXL", "s", "XL", "l"]) == ["xs", "s", "M", "l", "XL", "xxl", "XXXL"]


def test_unknown_sizes_go_last_lexicographically():
    assert sort_sizes(["Unico", "M", "Grande", "38"]) == ["38", "M", "Grande", "Unico"]


def test_nan_is_not_numeric():
    assert size_sort_key("NaN")[0] == 2
    assert sort_sizes(["NaN", "S", "1"]) == ["1", "S", "NaN"]
