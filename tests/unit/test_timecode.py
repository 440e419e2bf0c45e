import pytest
from app.timecode import format_timestamp, parse_timestamp

@pytest.mark.unit
class TestTimecode:
    @pytest.mark.parametrize("timestamp, seconds", [
        ("00:05", 5),
        ("0:05", 5),
        ("00:54", 54),
        ("01:00", 60),
        ("2:07", 127),
        ("125:59", 7559),
    ])
    def test_parse(self, timestamp, seconds):
        assert parse_timestamp(timestamp) == seconds

    @pytest.mark.parametrize("bad", ["", "5", "00:5", "00:60", "aa:bb", "-1:00", "1:2:3"])
    def test_parse_rejects_malformed(self, bad):
        with pytest.raises(ValueError):
            parse_timestamp(bad)

    def test_format_pads_seconds(self):
        assert format_timestamp(5) == "00:05"
        assert format_timestamp(5, pad_minutes=False) == "0:05"
        assert format_timestamp(613) == "10:13"

    def test_format_floors_fractions(self):
        assert format_timestamp(13.9, pad_minutes=False) == "0:13"

    def test_format_rejects_negative(self):
        with pytest.raises(ValueError):
            format_timestamp(-1)

    def test_round_trip_without_drift(self):
        for seconds in range(0, 4 * 3600):
            assert parse_timestamp(format_timestamp(seconds)) == seconds
            assert parse_timestamp(format_timestamp(seconds, pad_minutes=False)) == seconds
