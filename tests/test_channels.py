import pytest

from pcmflow.channels import ChannelCountConverter


def test_remove_channels():
    output = list(ChannelCountConverter(iter([1, 2, 3, 1, 2, 3]), 3, 2))
    assert output == [1, 2, 1, 2]

    output = list(ChannelCountConverter(iter([1, 2, 3, 4, 1, 2, 3, 4]), 4, 1))
    assert output == [1, 1]


def test_add_channels():
    output = list(ChannelCountConverter(iter([1, 2, 1, 2]), 2, 3))
    assert output == [1, 2, 2, 1, 2, 2]

    output = list(ChannelCountConverter(iter([1, 2, 1, 2]), 2, 4))
    assert output == [1, 2, 2, 2, 1, 2, 2, 2]


def test_len_more():
    output = ChannelCountConverter(iter([1, 2, 1, 2]), 2, 3)
    assert output.size_hint() == (6, 6)


def test_len_less():
    output = ChannelCountConverter(iter([1, 2, 1, 2]), 2, 1)
    assert output.size_hint() == (2, 2)


def test_size_hint_matches_output_length():
    conv = ChannelCountConverter(iter([1, 2, 3, 4, 5, 6]), 2, 3)
    low, high = conv.size_hint()
    assert low == high == len(list(conv))


def test_same_count_passes_through():
    data = [5, 6, 7, 8]
    assert list(ChannelCountConverter(iter(data), 2, 2)) == data


def test_accepts_plain_iterable_and_into_inner():
    conv = ChannelCountConverter([1, 2, 3, 4], 2, 2)
    assert iter(conv) is conv
    assert next(conv) == 1
    assert list(conv.into_inner()) == [2, 3, 4]


@pytest.mark.parametrize("from_channels, to_channels", [(0, 2), (2, 0)])
def test_zero_channels_rejected(from_channels, to_channels):
    with pytest.raises(ValueError):
        ChannelCountConverter(iter([1, 2]), from_channels, to_channels)


def test_unknown_upper_bound_propagates():
    conv = ChannelCountConverter((x for x in [1, 2]), 1, 2)
    assert conv.size_hint()[1] is None
    assert list(conv) == [1, 1, 2, 2]