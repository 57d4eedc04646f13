"""In-process cache with LRU eviction, consistent hashing and single-flight loading."""