#setup: pip install -e ".[test]"
#setup: flask --app savings_simulator.wsgi run --port 5000 --debug

from savings_simulator.app import create_app

app = create_app()


if __name__ == "__main__":
    app.run(port=5000, debug=app.config["SETTINGS"].env == "dev")
