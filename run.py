from scorekeeper import create_app

app = create_app()
 
if __name__ == '__main__':
    # One request at a time keeps session mutations strictly sequential
    app.run(debug=True, threaded=False)
