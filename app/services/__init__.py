"""
app.services
------------

Domain logic kept out of the HTTP layer: trending and search scoring,
affiliate links, tool validation, rate limiting, auditing, revalidation,
outbound integrations (page enrichment, news) and the workflow engine.
"""
