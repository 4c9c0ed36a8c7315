"""searchlayer — Query construction and result normalization for document-search engines.

Translates typed search parameters into Elasticsearch / OpenSearch query
documents and normalizes engine replies into a stable ``{results, total}``
envelope, whichever reply shape the engine client produced.
"""

__version__ = "0.1.0"
