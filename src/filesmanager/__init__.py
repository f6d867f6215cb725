"""Files Manager - a single-root file storage service.

- Uploads, listings and deletions are confined to one storage root
- Every caller-supplied path is normalized before it is checked
- The root is chosen once at startup from a short list of candidates
"""

__version__ = "1.0.0"
