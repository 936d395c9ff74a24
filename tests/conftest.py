import fnmatch
import pytest


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the app uses."""

    def __init__(self):
        self.kv = {}
        self.lists = {}

    def get(self, key):
        return self.kv.get(key)

    def set(self, key, value, px=None, ex=None, nx=False):
        if nx and key in self.kv:
            return None
        self.kv[key] = str(value)
        return True

    def delete(self, key):
        existed = key in self.kv or key in self.lists
        self.kv.pop(key, None)
        self.lists.pop(key, None)
        return int(existed)

    def incr(self, key, amount=1):
        self.kv[key] = str(int(self.kv.get(key) or 0) + amount)
        return int(self.kv[key])

    def lpush(self, key, *values):
        lst = self.lists.setdefault(key, [])
        for v in values:
            lst.insert(0, str(v))
        return len(lst)

    def lrange(self, key, start, end):
        lst = self.lists.get(key, [])
        return lst[start:] if end == -1 else lst[start:end + 1]

    def ltrim(self, key, start, end):
        self.lists[key] = self.lrange(key, start, end)
        return True

    def keys(self, pattern="*"):
        return [k for k in list(self.kv) + list(self.lists) if fnmatch.fnmatch(k, pattern)]

    def eval(self, script, numkeys, key, token):
        # Only the compare-and-delete lock release script is used
        if self.kv.get(key) == token:
            return self.delete(key)
        return 0


@pytest.fixture
def fake_redis(monkeypatch):
    r = FakeRedis()
    for target in (
        "bgv.store.attempt_repo.get_redis",
        "bgv.store.org_config.get_redis",
        "bgv.utils.lock.get_redis",
        "bgv.observability.metrics.get_redis",
    ):
        monkeypatch.setattr(target, lambda: r)
    return r
