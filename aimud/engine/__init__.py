"""Narrative orchestration engine.

This package provides:
- NarrativeEngine: initialize / process_action entry points
- ResponseParser: tolerant decoding of backend replies
- The two-phase cycle graph (primary call, checks, follow-up, commit)
- Prompt construction and the generative backend seam
"""
