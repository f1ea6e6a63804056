import pytest

from receipt_ocr.extraction import Category, CategoryClassifier, KeywordTables, LineCorpus


@pytest.fixture
def classifier(keywords):
    return CategoryClassifier(keywords)


def test_priority_order_resolves_multiple_matches(classifier):
    corpus = LineCorpus(["CITY CAFE", "Uber pickup"])
    assert classifier.classify("CITY CAFE", corpus) is Category.FOOD


def test_merchant_alone_can_classify(classifier):
    assert classifier.classify("Apollo Pharmacy", LineCorpus()) is Category.MEDICAL


@pytest.mark.parametrize("line, expected", [
    ("PVR Cinemas", Category.ENTERTAINMENT),
    ("Indian Oil Petrol Pump", Category.TRANSPORT),
    ("Lifestyle Fashion", Category.SHOPPING),
    ("Starbucks Coffee", Category.FOOD),
    ("Care Clinic", Category.MEDICAL),
])
def test_keywords_in_receipt_text(classifier, line, expected):
    assert classifier.classify(None, LineCorpus([line, "Total 100.00"])) is expected


def test_matching_is_case_insensitive(classifier):
    assert classifier.classify(None, LineCorpus(["UBER TRIP"])) is Category.TRANSPORT


def test_no_keyword_gives_other(classifier):
    corpus = LineCorpus(["Receipt 001", "Paid 20.00"])
    assert classifier.classify(None, corpus) is Category.OTHER


def test_custom_keyword_tables():
    tables = KeywordTables(categories={Category.MEDICAL: frozenset({"ayurveda"})})
    classifier = CategoryClassifier(tables)

    assert classifier.classify("Kerala Ayurveda", LineCorpus()) is Category.MEDICAL
    assert classifier.classify("City Cafe", LineCorpus()) is Category.OTHER
