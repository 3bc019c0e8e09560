from crawler.models.domain import Article, StoreFailure, StoreResult


def _article(**overrides) -> Article:
    data = {"_id": "a1", "link": "https://www.channelnewsasia.com/a/1", "source": "cna", "text": "", "category": "asia"}
    data.update(overrides)
    return Article.model_validate(data)


def test_article_reads_wire_names():
    article = _article(isProcessing=True)

    assert article.id == "a1"
    assert article.is_processing is True
    assert article.text_length is None


def test_article_tolerates_null_text_and_numeric_id():
    article = _article(_id=42, text=None)

    assert article.id == "42"
    assert article.text == ""


def test_set_text_recomputes_length():
    article = _article()
    article.set_text("Hello World")

    assert article.text_length == 11


def test_payload_keeps_unknown_fields_and_drops_unset_lock():
    payload = _article().to_payload()

    assert payload == {
        "_id": "a1",
        "link": "https://www.channelnewsasia.com/a/1",
        "source": "cna",
        "text": "",
        "category": "asia",
    }


def test_payload_lock_flag_present_only_when_locked():
    article = _article()
    article.is_processing = True
    assert article.to_payload()["isProcessing"] is True

    article.is_processing = None
    assert "isProcessing" not in article.to_payload()


def test_store_result_truthiness():
    assert StoreResult.success()
    failed = StoreResult.error(StoreFailure.SERVER, "500")
    assert not failed
    assert failed.failure is StoreFailure.SERVER
