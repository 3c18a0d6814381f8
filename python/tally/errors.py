class FatalError(Exception):
    '''Base class for failures that end the application. Nothing in tally recovers from these.'''

class InitializationFailure(FatalError):
    '''The UI could not be constructed.'''

class RunLoopFailure(FatalError):
    '''The run loop could not start, was started twice, or crashed.'''

class StaleHandleError(FatalError):
    '''A weak handle to the UI was resolved after the UI was destroyed.'''
