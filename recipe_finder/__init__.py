"""Finds a recipe for a query and scales it to the table. Centres around `scaling`.

What is actually ours?

- Picking a search strategy and the best recipe is left to the language model.
- The scraper is a stand-in returning sample posts.
- Quantities are the one thing worked out here: parse, scale, render back to
  something a cook would write.

Everything else should be easy to fake.
"""
