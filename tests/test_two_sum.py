from gee.leetcode.two_sum import two_sum


def test_source_example():
    assert two_sum([1, 5, 6, 8], 11) == [1, 2]


def test_first_pair():
    assert two_sum([2, 7, 11, 15], 9) == [0, 1]


def test_duplicate_values():
    assert two_sum([3, 3], 6) == [0, 1]


def test_not_found():
    assert two_sum([1, 2, 3], 100) is None


def test_result_sums_to_target():
    nums = [4, -2, 9, 13, 7]
    i, j = two_sum(nums, 11)
    assert i < j and nums[i] + nums[j] == 11