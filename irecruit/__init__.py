"""
irecruit
========

Platform service of the recruiting system.

The identity service owns accounts; this service owns the domain side of
those accounts (job seekers, companies and their staff) together with job
applications and interviews. The two are kept consistent through identity
events consumed from Redis Streams (:mod:`irecruit.identity`), while
applications and interviews are driven synchronously over the REST API
(:mod:`irecruit.recruitment`).
"""
