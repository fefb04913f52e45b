"""
ragcore: retrieval core for collections, embeddings, and ACL-aware search.
"""
