"""
Study Mentor: curated learning resources and exam study plans.

Search results from several providers are filtered, deduplicated and ranked,
folded into a prompt for a generative model, and the structured reply is
cached for a bounded time.
"""

__version__ = "1.0.0"
