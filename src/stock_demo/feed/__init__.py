"""
Live feed subsystem.

Components:
- feed_models.py: data structures (Sample, FeedState)
- live_feed.py: LiveValueFeed producer and FeedSubscription handle
"""
