import os

from app import create_app

app = create_app(os.getenv('FLASK_ENV', 'development'))

if __name__ == '__main__':
    app.run(debug=app.config.get('DEBUG', False), port=int(os.getenv('PORT', 5000)))
