"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Package initialization for the budgeting app.
-------------------------------------------------------------------------
"""
