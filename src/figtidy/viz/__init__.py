"""
figtidy.viz
===========

Figure formatting for figtidy.

Design
------
• Operations mutate a Figure they are handed; they never create or close one.
• figure.py is the only place that resolves the active pyplot figure and
  reads bounding boxes; layout.py and style.py work on explicit figures.
"""
