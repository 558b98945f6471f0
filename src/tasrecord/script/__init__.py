"""Script format: line source, tokenizer, codecs and the record/replay engine.

Import from the submodules (or from ``tasrecord``); this package module
stays empty so that the data model can use the numeric codecs without
pulling in the engine.
"""
