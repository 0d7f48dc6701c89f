"""
Crawl workers: per-URL pipeline and the engine that schedules it.
"""
