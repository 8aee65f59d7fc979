"""
HotTakes API: Service layer.

    validation        schema registry and id validator
    auth_service      passwords, tokens, bearer authentication
    voting            pure like/dislike state transitions
    sauce_repository  persistence store (sauces, users)
    file_service      image storage
    sauce_service     the review pipeline
    user_service      signup and login
"""
