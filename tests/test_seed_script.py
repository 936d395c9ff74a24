import pytest
from unittest.mock import patch, MagicMock
from scripts.seed_org_config import PREFIX, main, parse_pairs


@patch("scripts.seed_org_config.Redis")
def test_seed_org_config(mock_redis_cls):
    mock_redis = MagicMock()
    mock_redis_cls.from_url.return_value = mock_redis

    main(["org-1=Gridlines", "org-2=truthscreen"])

    calls = [c.args for c in mock_redis.set.call_args_list]
    assert calls == [
        (f"{PREFIX}org-1:verification_check", "gridlines"),
        (f"{PREFIX}org-2:verification_check", "truthscreen"),
    ]


@pytest.mark.parametrize("arg", ["org-1", "=gridlines", "org-1=acme"])
def test_bad_mapping_exits(arg):
    with pytest.raises(SystemExit):
        parse_pairs([arg])
