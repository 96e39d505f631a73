"""Development entry point: serve the API with uvicorn."""


def main() -> None:
    import uvicorn

    from cheque_manager.config import APP_ENV, PORT

    uvicorn.run(
        "cheque_manager.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=APP_ENV == "development",
    )


if __name__ == "__main__":
    main()
