import importlib

MODULES = [
    'doccrawl.config',
    'doccrawl.container',
    'doccrawl.domain',
    'doccrawl.services.crawl_engine',
    'doccrawl.services.knowledge_pipeline',
    'doccrawl.services.subject_catalog',
    'doccrawl.api.server',
]

def test_imports():
    for m in MODULES:
        importlib.import_module(m)
