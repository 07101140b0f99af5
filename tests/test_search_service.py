import pytest

from comicsearch.search_service import (
    Comic,
    IndexEntry,
    IndexInfo,
    SearchReply,
    SearchRequest,
    SearchService,
)


class FakeDB:
    def __init__(self, find_result=None, find_all_result=None, comics=None, errors=None):
        self.find_result = find_result
        self.find_all_result = find_all_result
        self.comics = comics or {}
        self.errors = errors or {}
        self.calls = []

    def find(self, words, limit):
        self.calls.append(("find", list(words), limit))
        if isinstance(self.find_result, Exception):
            raise self.find_result
        return self.find_result

    def find_all(self):
        self.calls.append(("find_all",))
        if isinstance(self.find_all_result, Exception):
            raise self.find_all_result
        return self.find_all_result

    def get_by_id(self, comic_id):
        self.calls.append(("get_by_id", comic_id))
        if comic_id in self.errors:
            raise self.errors[comic_id]
        return self.comics[comic_id]


class FakeWords:
    def __init__(self, result):
        self.result = result
        self.phrases = []

    def norm(self, phrase):
        self.phrases.append(phrase)
        if isinstance(self.result, Exception):
            raise self.result
        return list(self.result)


def comic(i):
    return Comic(id=i, url=f"https://xkcd.example.com/{i}")


def make_service(db=None, words=None):
    return SearchService(db or FakeDB(), words or FakeWords([]))


def test_new_service_has_empty_index():
    db = FakeDB()
    words = FakeWords([])
    service = SearchService(db, words)
    assert service.db is db
    assert service.words is words
    assert service.index == {}


def test_update_index_success():
    info = IndexInfo(
        comics=[
            IndexEntry(word="test", comic_ids=[1, 2, 3]),
            IndexEntry(word="hello", comic_ids=[1, 4]),
        ]
    )
    db = FakeDB(find_all_result=info)
    service = make_service(db=db)
    service.update_index()
    assert len(service.index) == 2
    assert service.index["test"] == {1, 2, 3}
    assert service.index["hello"] == {1, 4}
    assert db.calls == [("find_all",)]


def test_update_index_merges_with_existing_entries():
    db = FakeDB(find_all_result=IndexInfo(comics=[IndexEntry(word="test", comic_ids=[5])]))
    service = make_service(db=db)
    service.index["test"] = {1}
    service.update_index()
    assert service.index["test"] == {1, 5}


def test_update_index_db_error():
    error = RuntimeError("db error")
    service = make_service(db=FakeDB(find_all_result=error))
    with pytest.raises(RuntimeError) as info:
        service.update_index()
    assert info.value is error
    assert service.index == {}


def test_search_success():
    expected = SearchReply(comics=[comic(1), comic(2)])
    db = FakeDB(find_result=expected)
    words = FakeWords(["test", "search"])
    service = make_service(db, words)
    reply = service.search(SearchRequest(phrase="test search", limit=10))
    assert reply == expected
    assert words.phrases == ["test search"]
    assert db.calls == [("find", ["test", "search"], 10)]


def test_search_normalization_error():
    error = RuntimeError("normalization error")
    db = FakeDB()
    service = make_service(db, FakeWords(error))
    with pytest.raises(RuntimeError) as info:
        service.search(SearchRequest(phrase="test search", limit=10))
    assert info.value is error
    assert db.calls == []


def test_search_db_error():
    error = RuntimeError("db find error")
    db = FakeDB(find_result=error)
    service = make_service(db, FakeWords(["test", "search"]))
    with pytest.raises(RuntimeError) as info:
        service.search(SearchRequest(phrase="test search", limit=10))
    assert info.value is error
    assert db.calls == [("find", ["test", "search"], 10)]


def test_search_index_success():
    db = FakeDB(comics={i: comic(i) for i in range(1, 5)})
    service = make_service(db, FakeWords(["test", "hello"]))
    service.index["test"] = {1, 2, 3}
    service.index["hello"] = {1, 4}
    service.index["world"] = {5}
    reply = service.search_index(SearchRequest(phrase="test hello", limit=10))
    assert [c.id for c in reply.comics] == [1, 2, 3, 4]
    assert reply.comics[0] == comic(1)


def test_search_index_with_limit():
    db = FakeDB(comics={1: comic(1), 2: comic(2)})
    service = make_service(db, FakeWords(["test", "hello"]))
    service.index["test"] = {1, 2, 3}
    service.index["hello"] = {1, 4}
    reply = service.search_index(SearchRequest(phrase="test hello", limit=2))
    assert [c.id for c in reply.comics] == [1, 2]
    assert db.calls == [("get_by_id", 1), ("get_by_id", 2)]


def test_search_index_no_results():
    db = FakeDB()
    service = make_service(db, FakeWords(["unknown", "words"]))
    service.index["test"] = {1}
    reply = service.search_index(SearchRequest(phrase="unknown words", limit=10))
    assert reply.comics == []
    assert db.calls == []


def test_search_index_empty_phrase():
    db = FakeDB()
    service = make_service(db, FakeWords([]))
    service.index["test"] = {1}
    reply = service.search_index(SearchRequest(phrase="", limit=10))
    assert reply.comics == []
    assert db.calls == []


def test_search_index_get_by_id_error_is_skipped():
    db = FakeDB(comics={1: comic(1)}, errors={2: RuntimeError("db error")})
    service = make_service(db, FakeWords(["test"]))
    service.index["test"] = {1, 2}
    reply = service.search_index(SearchRequest(phrase="test", limit=10))
    assert [c.id for c in reply.comics] == [1]
    assert ("get_by_id", 2) in db.calls


def test_search_index_normalization_error():
    error = RuntimeError("normalization error")
    db = FakeDB()
    service = make_service(db, FakeWords(error))
    with pytest.raises(RuntimeError) as info:
        service.search_index(SearchRequest(phrase="test search", limit=10))
    assert info.value is error
    assert db.calls == []


def test_search_index_tie_breaking():
    db = FakeDB(comics={i: comic(i) for i in range(1, 6)})
    service = make_service(db, FakeWords(["test"]))
    service.index["test"] = {5, 1, 3, 2, 4}
    reply = service.search_index(SearchRequest(phrase="test", limit=5))
    assert [c.id for c in reply.comics] == [1, 2, 3, 4, 5]


def test_search_index_higher_score_first():
    db = FakeDB(comics={i: comic(i) for i in range(1, 10)})
    service = make_service(db, FakeWords(["a", "b", "c"]))
    service.index["a"] = {1, 9}
    service.index["b"] = {9, 2}
    service.index["c"] = {9}
    reply = service.search_index(SearchRequest(phrase="a b c", limit=10))
    assert [c.id for c in reply.comics] == [9, 1, 2]