"""
scrayper – Harvest malware specimens from the malc0de listing.

Supports:
  • Walking a range of listing pages (malc0de database table)
  • Downloading each listed sample from its upstream host
  • Publishing samples into a local storage tree keyed by file hash
  • Timestamped run logs and a database liveness check
"""
