import uvicorn

from sitecarbon.config import HOST, PORT


def main():
    uvicorn.run("sitecarbon.app:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
