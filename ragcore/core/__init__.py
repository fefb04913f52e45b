"""
Core domain layer: hashing, chunking, batching, query building, reranking.
"""
