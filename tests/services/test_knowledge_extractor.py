from unittest.mock import Mock

import pytest

from doccrawl.domain.document import CrawledDocument, DocumentMetadata, DocumentType
from doccrawl.domain.knowledge import ComplexityTier
from doccrawl.exceptions import StorageError
from doccrawl.services.knowledge_extractor import KnowledgeExtractor
from doccrawl.services.knowledge_store import InMemoryKnowledgeStore


API_CONTENT = "\n".join([
    "View",
    "/// A type that represents part of your app's interface.",
    "protocol View",
    "Instance Methods",
    "// Returns a view with padding applied.",
    "func padding(_ length: CGFloat) -> some View",
    "func task(priority: TaskPriority) async",
    "struct ForEach<Data, ID, Content>",
    "class func makeDefault()",
])


def _doc(url, doc_type, content="", html="", title="Doc", language=None):
    return CrawledDocument(
        url=url,
        title=title,
        content=content,
        html=html,
        metadata=DocumentMetadata(document_type=doc_type, code_language=language),
    )


def api_doc():
    return _doc("https://developer.apple.com/documentation/swiftui/view", DocumentType.API_REFERENCE, content=API_CONTENT)


def tutorial(url, content):
    return _doc(url, DocumentType.TUTORIAL, content=content)


def test_capabilities_from_declaration_lines():
    knowledge = KnowledgeExtractor().extract("swiftui", [api_doc()])
    caps = {c.name: c for c in knowledge.capabilities}

    assert list(caps) == ["View", "padding", "task", "ForEach", "makeDefault"]
    assert caps["View"].description.startswith("A type that represents part of your app's interface.")
    assert "Returns a view with padding applied." in caps["padding"].description
    assert caps["padding"].endpoints == ("padding",)
    assert caps["padding"].complexity is ComplexityTier.INTERMEDIATE
    assert caps["task"].complexity is ComplexityTier.ADVANCED
    assert caps["ForEach"].complexity is ComplexityTier.ADVANCED


def test_capabilities_only_from_api_reference_documents():
    doc = _doc("https://example.com/tutorials/x", DocumentType.TUTORIAL, content="func hidden()")
    assert KnowledgeExtractor().extract("x", [doc]).capabilities == ()


def test_capabilities_deduplicated_by_name():
    knowledge = KnowledgeExtractor().extract("swiftui", [api_doc(), api_doc()])
    names = [c.name for c in knowledge.capabilities]
    assert len(names) == len(set(names))


def test_pattern_names_unioned_across_documents():
    docs = [
        tutorial("https://example.com/tutorials/a", "Use the Observer pattern with a Factory."),
        tutorial("https://example.com/tutorials/b", "Observer again, and Factory once more. Observer!"),
    ]
    knowledge = KnowledgeExtractor().extract("combine", docs)
    assert knowledge.pattern_names == frozenset({"Observer", "Factory"})


def test_patterns_match_whole_words_in_tutorials_only():
    docs = [
        tutorial("https://example.com/tutorials/a", "The ObserverKit module and an MVCC store."),
        _doc("https://example.com/documentation/a", DocumentType.API_REFERENCE, content="Singleton"),
    ]
    assert KnowledgeExtractor().extract("x", docs).pattern_names == frozenset()


def test_code_examples_from_code_and_pre_blocks():
    html = """
    <p>Call <code>body</code> to render.</p>
    <pre><code>struct ContentView: View { var body: some View { Text("Hi") } }</code></pre>
    <pre>let publisher = Just(5).map { $0 * 2 }</pre>
    <code>struct ContentView: View { var body: some View { Text("Hi") } }</code>
    """
    doc = _doc("https://example.com/tutorials/x", DocumentType.TUTORIAL, html=html, title="Intro", language="swift")
    examples = KnowledgeExtractor().extract("x", [doc]).examples

    assert [e.code for e in examples] == [
        'struct ContentView: View { var body: some View { Text("Hi") } }',
        "let publisher = Just(5).map { $0 * 2 }",
    ]
    assert examples[0].title == "Code Example from Intro"
    assert examples[0].description == "Extracted from https://example.com/tutorials/x"
    assert examples[0].source_url == "https://example.com/tutorials/x"
    assert examples[0].language == "swift"


def test_code_example_language_falls_back_to_default():
    doc = _doc("https://example.com/x", DocumentType.UNKNOWN, html="<pre>print(\"hello, world of code\")</pre>")
    examples = KnowledgeExtractor(default_code_language="python").extract("x", [doc]).examples
    assert examples[0].language == "python"


def test_extraction_is_idempotent():
    html = "<pre>let publisher = Just(5).map { $0 * 2 }</pre>"
    docs = [
        api_doc(),
        tutorial("https://example.com/tutorials/a", "MVVM with a Coordinator and a Delegate."),
        _doc("https://example.com/sample-code/a", DocumentType.SAMPLE_CODE, html=html),
    ]
    extractor = KnowledgeExtractor()
    first = extractor.extract("s", docs)
    second = extractor.extract("s", docs)

    assert first.capabilities == second.capabilities
    assert first.pattern_names == second.pattern_names
    assert first.examples == second.examples


def test_extract_and_store_hands_record_to_store():
    store = InMemoryKnowledgeStore()
    extractor = KnowledgeExtractor(store)
    knowledge = extractor.extract_and_store("swiftui", [api_doc()])

    assert store.get("swiftui") is knowledge
    assert store.list_subjects() == ["swiftui"]


def test_store_failure_surfaces_as_storage_error():
    store = Mock()
    store.save.side_effect = IOError("disk full")
    extractor = KnowledgeExtractor(store)

    with pytest.raises(StorageError) as exc:
        extractor.extract_and_store("swiftui", [api_doc()])
    assert exc.value.subject_id == "swiftui"
    assert isinstance(exc.value.original, IOError)
    assert exc.value.__cause__ is exc.value.original


def test_storage_error_from_store_is_not_rewrapped():
    original = StorageError("swiftui", RuntimeError("conflict"))
    store = Mock()
    store.save.side_effect = original
    with pytest.raises(StorageError) as exc:
        KnowledgeExtractor(store).extract_and_store("swiftui", [])
    assert exc.value is original


def test_extract_and_store_without_store_is_a_storage_error():
    with pytest.raises(StorageError):
        KnowledgeExtractor().extract_and_store("swiftui", [])
