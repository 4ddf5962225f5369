"""
Unit tests for the command mixins.

Runs each command family against the in-memory store and checks argument
validation happens before the store is contacted.
"""

from datetime import timedelta

import pytest

from rdb_engine.exceptions import ArgumentError, NilReplyError


class TestServerCommands:
    def test_db_size(self, client):
        assert client.db_size() == 0
        client.set("a", "1")
        client.set("b", "2")
        assert client.db_size() == 2

    def test_flush_db_only_clears_current_database(self, unsafe_client, store):
        unsafe_client.set("a", "1")
        store.dbs[7]["other"] = "x"
        unsafe_client.flush_db()
        assert unsafe_client.db_size() == 0
        assert store.dbs[7] == {"other": "x"}


class TestConnectionCommands:
    def test_ping(self, client):
        assert client.ping() == "PONG"
        assert client.ping("hello") == "hello"
        assert client.stats().counts.count("PING") == 2

    def test_echo(self, client):
        assert client.echo("hello") == "hello"

    def test_quit_discards_connection(self, client, store):
        client.ping()
        client.quit()
        assert client.stats().pool.active_count == 0
        assert store.closed == 1
        assert client.ping() == "PONG"
        assert store.dialed == 2


class TestKeyCommands:
    def test_set_get_delete_scenario(self, client):
        client.set("k", "v")
        assert client.get("k") == "v"
        assert client.delete("k") == 1
        with pytest.raises(NilReplyError):
            client.get("k")

    def test_delete_counts_existing_keys(self, client):
        client.set("a", "1")
        client.set("b", "2")
        assert client.delete("a", "b", "c") == 2

    def test_delete_requires_keys(self, client, store):
        with pytest.raises(ArgumentError, match="no keys"):
            client.delete()
        with pytest.raises(ArgumentError, match="empty keys"):
            client.delete("a", " ")
        assert store.dialed == 0

    def test_exists_and_expire(self, client):
        assert client.exists("k") is False
        assert client.expire("k", 10) is False
        client.set("k", "v")
        assert client.exists("k") is True
        assert client.expire("k", 10) is True

    def test_keys(self, client):
        client.set("user:1", "a")
        client.set("user:2", "b")
        client.set("session:1", "c")
        assert client.keys("user:*") == ["user:1", "user:2"]
        assert client.keys("nothing:*") == []

    def test_rename(self, client):
        client.set("old", "v")
        client.rename("old", "new")
        assert client.get("new") == "v"
        assert client.exists("old") is False

    def test_rename_same_key_rejected(self, client):
        with pytest.raises(ArgumentError, match="from == to"):
            client.rename("k", "k")

    def test_del_pattern(self, unsafe_client, store):
        unsafe_client.set("user:1", "a")
        unsafe_client.set("user:2", "b")
        unsafe_client.set("other", "c")
        assert unsafe_client.del_pattern("user:*") == 2
        assert unsafe_client.keys("*") == ["other"]

    def test_del_pattern_without_matches_skips_delete(self, unsafe_client, store):
        assert unsafe_client.del_pattern("none:*") == 0
        assert store.commands("DEL") == 0
        assert unsafe_client.stats().counts.count("KEYS") == 1

    @pytest.mark.parametrize("key", ["", "  "])
    def test_blank_key_rejected(self, client, store, key):
        with pytest.raises(ArgumentError, match="empty key"):
            client.exists(key)
        assert store.dialed == 0


class TestListCommands:
    def test_push_pop(self, client):
        assert client.rpush("q", "a", "b") == 2
        assert client.lpush("q", "z") == 3
        assert client.llen("q") == 3
        assert client.lpop("q") == "z"
        assert client.rpop("q") == "b"
        assert client.llen("q") == 1

    def test_pop_empty_list(self, client):
        with pytest.raises(NilReplyError):
            client.lpop("missing")
        with pytest.raises(NilReplyError):
            client.rpop("missing")

    def test_push_requires_items(self, client):
        with pytest.raises(ArgumentError, match="no items"):
            client.lpush("q")
        with pytest.raises(ArgumentError, match="empty items"):
            client.rpush("q", "")


class TestSetCommands:
    def test_sadd_scard_scenario(self, client):
        assert client.sadd("s", "a", "b", "c") == 3
        assert client.scard("s") == 3
        assert client.sadd("s", "a") == 0

    def test_smembers(self, client):
        client.sadd("s", "b", "a")
        assert sorted(client.smembers("s")) == ["a", "b"]
        assert client.smembers("missing") == []

    def test_store_operations(self, client):
        client.sadd("x", "1", "2", "3")
        client.sadd("y", "3", "4")
        assert client.sdiffstore("d", "x", "y") == 2
        assert sorted(client.smembers("d")) == ["1", "2"]
        assert client.sunionstore("u", "x", "y") == 4

    def test_sadd_requires_members(self, client):
        with pytest.raises(ArgumentError, match="no members"):
            client.sadd("s")

    def test_store_requires_dest(self, client):
        with pytest.raises(ArgumentError, match="empty dest"):
            client.sunionstore("", "x")


class TestStringCommands:
    def test_append(self, client):
        assert client.append("s", "ab") == 2
        assert client.append("s", "cd") == 4
        assert client.get("s") == "abcd"

    def test_appends_joins_with_separator(self, client):
        assert client.appends("log", ",", "a", "b") == 3
        assert client.get("log") == "a,b"
        assert client.stats().counts.count("APPEND") == 1

    def test_incr(self, client):
        assert client.incr("n") == 1
        assert client.incr("n") == 2

    def test_mget_missing_keys_are_empty(self, client):
        client.set("a", "1")
        client.set("c", "3")
        assert client.mget("a", "b", "c") == ["1", "", "3"]

    def test_setex(self, client):
        client.setex("k", "v", 10)
        assert client.get("k") == "v"

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_setex_rejects_short_expiry(self, client, store, seconds):
        with pytest.raises(ArgumentError, match="invalid expiry"):
            client.setex("k", "v", seconds)
        assert store.dialed == 0

    def test_setex_duration(self, client, store):
        client.setex_duration("k", "v", timedelta(minutes=1))
        assert client.get("k") == "v"
        assert client.stats().counts.count("SETEX") == 1

    def test_setex_duration_below_one_second_rejected(self, client):
        with pytest.raises(ArgumentError):
            client.setex_duration("k", "v", timedelta(milliseconds=500))
