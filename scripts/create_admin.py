# Grant the admin role to an existing account:
#   python -m scripts.create_admin someone@example.com
import sys

from raiz import create_app, security


def main(argv=None, app=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python -m scripts.create_admin EMAIL")
        return 2

    from raiz.services.moderation_service import promote_user

    email = argv[0]
    app = app or create_app()
    with app.app_context():
        user = security.datastore.find_user(email=email)
        if user is None:
            print(f"User {email} not found")
            return 1
        if promote_user(user):
            print("Added admin role to user")
        else:
            print("User already has admin role")
    return 0


if __name__ == '__main__':
    sys.exit(main())
