"""
Campfire Cash Cannon - Airtable-to-HCB Disbursements

Reads events with an owed amount from Airtable, creates a disbursement record
for each, sends the matching HCB transfer and writes the outcome back.
"""

__version__ = "0.1.0"
__author__ = "Campfire Team"
