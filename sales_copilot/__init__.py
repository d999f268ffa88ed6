"""Sales Copilot: a research assistant for B2B sales teams.

Architecture Overview
=====================

A **LangGraph** agent (``agent.py``) drives Claude through a chatbot → tools
loop.  The tools sit on top of two external data sources, each handled by
the same three-stage pipeline:

1. **client**     one request per call, typed params in, decoded JSON out
                  (``services/apollo_client.py``, ``services/unipile_client.py``)
2. **cleaner**    pure functions that reduce the very wide upstream records to
                  the handful of fields the LLM needs
3. **formatter**  (Apollo only) renders the cleaned document as markdown

Document tools (``tools/documents.py``) let the agent draft and revise longer
pieces (outreach emails, account briefs) with a streaming writer model.

Key Design Decisions
--------------------
- **Configuration** is resolved once by ``config.get_settings()`` from the
  environment, ``.env`` or AWS SSM, and handed to the clients explicitly.
- **No retries, no caching**: a failed upstream call raises
  ``ApolloAPIError`` / ``UnipileAPIError``; tools turn it into text.
- **Metrics**: every external call is counted and timed in CloudWatch.
- **Memory**: LangGraph's MemorySaver keeps per-session history.
- **Dual Interface**: FastAPI server (``server.py``) + CLI chat loop (``main.py``).
"""
