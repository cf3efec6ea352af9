"""Saúde Bot - a health service assistant for Porto Velho.

Architecture Overview
=====================

The bot runs a short, linear questionnaire per user and finishes by
pointing the user at nearby health units.

1. **Conversation engine**: a per-user state machine (``START →
   GET_NAME → ...``) that validates each answer, stores it on the
   session and returns the next question.  Sessions live in memory for
   the lifetime of the process.

2. **Facility resolution**: three sources, one per flow:

   - ``city``: a static table of service points by city/neighborhood;
   - ``neighborhood``: the mock facilities API (``GET /postos-saude``);
   - ``location``: reverse geocoding (Nominatim) to a state code, the
     Ministry of Health open-data API cached per state on disk, and a
     haversine ranking of the closest units.

3. **Channels**: the WhatsApp Cloud API webhook, an HTTP chat API and a
   terminal REPL.  Each one only pipes text in and out of the engine.

Package Structure
-----------------
- ``saude_bot/config.py``: configuration from environment / SSM
- ``saude_bot/conversation/``: steps, sessions, validation, engine
- ``saude_bot/facilities/``: static data, geo helpers, ranking, formatting
- ``saude_bot/services/``: HTTP clients, region cache, metrics
- ``saude_bot/api/``: FastAPI routers and Pydantic schemas
- ``saude_bot/server.py``: FastAPI application
- ``saude_bot/main.py``: terminal chat
"""
