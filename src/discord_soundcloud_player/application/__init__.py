"""
Application Layer

Orchestrates domain objects and infrastructure adapters to fulfil use cases.

Structure:
- services/: session registry, search cache, playback and search orchestration
- interfaces/: Port interfaces for infrastructure adapters
"""
