import time
from random import randint

import nox
from nox.sessions import Session

PYTHON_VERSIONS = ["3.9", "3.10", "3.11", "3.12"]
PACKAGE = "billtag"
DB_DRIVERS = ["postgresql", "postgresql+pg8000"]

nox.options.reuse_existing_virtualenvs = True
nox.options.sessions = ("pytest",)


@nox.session(python=PYTHON_VERSIONS)
def pytest(session):
    print("SQLALCHEMY_DATABASE_URI=", session.env.get("SQLALCHEMY_DATABASE_URI"))

    session.install("-e", ".[tests]")

    session.run("pip", "check")
    session.run("pytest", "-q", PACKAGE)


@nox.session(python=PYTHON_VERSIONS)
@nox.parametrize("db_driver", DB_DRIVERS)
def dbtests(session: Session, db_driver):
    session.install("psycopg2-binary", "pg8000")

    db_name = f"billtag{randint(0, 10000000)}"
    uri = f"{db_driver}:///{db_name}"
    print("SQLALCHEMY_DATABASE_URI=", uri)
    session.env["SQLALCHEMY_DATABASE_URI"] = uri

    session.run("createdb", db_name, external=True)

    session.install("-e", ".[tests]")
    session.run("pip", "check")

    t0 = time.time()
    session.run("pytest", "-q", PACKAGE)
    t1 = time.time()

    with open("benchmark-result.txt", "a") as fd:
        fd.write(f"{session.python} {db_driver} -> Elapsed time: {t1 - t0}\n")

    session.run("dropdb", db_name, external=True)
