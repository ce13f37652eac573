"""
Recruitment Portal - Flask frontend for the applicant tracking system backend.

Candidates register, complete profiles, browse jobs and track applications;
employees manage postings, screening, interviews, offers and documents;
admins manage employee accounts.
"""
