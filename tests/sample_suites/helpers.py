from env_test import test


@test()
def shared_case(p):
    pass
