from env_test import test


class BaseTests:

    @test()
    def first(self, p):
        pass

    @test()
    def second(self, p):
        pass


class DerivedTests(BaseTests):

    @test(name_suffix="override")
    def first(self, p):
        pass

    @test()
    def third(self, p):
        pass
